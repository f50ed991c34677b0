import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./portal.db")

# ✅ Session tokens (issued by the identity provider, verified here)
SECRET_KEY = os.getenv("SECRET_KEY", "dev-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "60"))

# ✅ Identity provider (SuperTokens)
SUPERTOKENS_APP_NAME = os.getenv("SUPERTOKENS_APP_NAME", "Hackathon Portal")
SUPERTOKENS_CONNECTION_URI = os.getenv("SUPERTOKENS_CONNECTION_URI", "http://localhost:3567")
SUPERTOKENS_API_KEY = os.getenv("SUPERTOKENS_API_KEY")
SUPERTOKENS_API_DOMAIN = os.getenv("SUPERTOKENS_API_DOMAIN", "http://localhost:8080")
SUPERTOKENS_API_BASE_PATH = os.getenv("SUPERTOKENS_API_BASE_PATH", "/auth")
GOOGLE_AUTH_ENABLED = os.getenv("GOOGLE_AUTH_ENABLED", "false").lower() == "true"

# ✅ Frontend
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ✅ Rate limiting
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "20"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
