from os import getenv
from dotenv import load_dotenv

load_dotenv()

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://todoapp:todoapp@db:5432/todoapp")
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  #expire au bout de 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  #expire au bout d'1 mois
    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
    PORT = int(getenv("PORT", "5000"))

settings = Settings()
