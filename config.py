# --- LUNARCRUSH ENDPOINTS ---
LUNARCRUSH_BASE_URL = "https://lunarcrush.com"
LUNARCRUSH_CATEGORY_URL = (
    f"{LUNARCRUSH_BASE_URL}/api3/storm/category/cryptocurrencies"
)
LUNARCRUSH_CATEGORY_PAGE_URL = f"{LUNARCRUSH_BASE_URL}/categories/cryptocurrencies"

# Substring used to recognise authenticated API traffic inside the browser
LUNARCRUSH_API_URL_MARKER = "api3/storm"

# Sent verbatim with every API request, never computed
LUNARCRUSH_FINGERPRINT_HEADERS = {
    "sec-ch-ua": '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "x-lunar-client": "yolo",
    "Referer": LUNARCRUSH_CATEGORY_PAGE_URL,
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# --- CREDENTIALS ---
TOKEN_EXPIRY_HOURS = 12

# --- BROWSER (token interception) ---
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
BROWSER_LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-dev-shm-usage",
]
BROWSER_NAVIGATION_TIMEOUT_SECONDS = 60
BROWSER_RESPONSE_TIMEOUT_SECONDS = 10

# --- HTTP ---
HTTP_TIMEOUT_SECONDS = 60

# --- PAYLOAD ---
# "verbose" (symbol, volume_24h, ...) or "compact" (s, v, pch, ...)
PAYLOAD_SHAPE = "verbose"

# --- DATABASE ---
MONGO_URL = "mongodb://localhost:27017/crypto_db"
MONGO_DATABASE = "crypto_db"
MONGO_COLLECTION_NAME = "lunarcrush_data"

# --- LOGGING ---
LOG_LEVEL = "INFO"
LOG_FILE_PATH = "logs/lunar_snapshot.log"
