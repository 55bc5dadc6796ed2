"""
Constants for the Numora client.
"""

# API Configuration
DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_MAX_RETRIES = 3

# HTTP Status Codes
SUCCESS_STATUS_CODE = 200
ERROR_STATUS_CODE = 500

# Backend endpoints
POSITIONS_ENDPOINTS = {
    "hyperliquid": "/api/hyperliquid/positions",
    "orderly": "/api/orderly/positions",
    "polymarket": "/api/polymarket/positions",
}
OPEN_ORDERS_ENDPOINT = "/api/hyperliquid/open-orders"
CLOSE_POSITION_ENDPOINT = "/api/hyperliquid/close-position"
CLOSE_ALL_ENDPOINT = "/api/hyperliquid/close-all"
WALLET_BALANCES_ENDPOINT = "/api/wallets/balances"
EMBEDDED_WALLET_ENDPOINT = "/api/wallets/embedded"
PREDICTION_ORDER_ENDPOINT = "/api/polymarket/order"

# Symbol decorations stripped for display
DISPLAY_SYMBOL_SUFFIXES = ("-PERP", "-USD")

# Balance guard
MINIMUM_MATIC_FOR_GAS = "0.01"  # one transaction's gas on Polygon, roughly

# Bridging widget (Router Nitro)
BRIDGE_HOST = "app.routernitro.com"
POLYGON_CHAIN_ID = 137
BRIDGE_WINDOW_NAME = "RouterNitroPolygon"
BRIDGE_WINDOW_WIDTH = 500
BRIDGE_WINDOW_HEIGHT = 700

# Bridge aggregator (Router Pathfinder)
PATHFINDER_BASE_URL = "https://api-beta.pathfinder.routerprotocol.com/api"
PATHFINDER_PARTNER_ID = "0"
# Hyperliquid deposits settle through native USDC on Arbitrum
DEPOSIT_DESTINATION_CHAIN_ID = "42161"
DEPOSIT_DESTINATION_TOKEN_ADDRESS = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
DEFAULT_SLIPPAGE_TOLERANCE = "1"

# Polling intervals (seconds)
POSITIONS_REFRESH_INTERVAL = 5.0
ORDERS_REFRESH_INTERVAL = 10.0
BALANCES_REFRESH_INTERVAL = 10.0
