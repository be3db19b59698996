# runtime settings, overridable through environment variables
import os

API_BASE_URL = os.getenv("FARMCONNECT_API_URL", "https://agrofarm-vd8i.onrender.com")
API_TIMEOUT = float(os.getenv("FARMCONNECT_TIMEOUT", "15"))

DB_PATH = os.getenv("FARMCONNECT_DB", "data/farmconnect.sqlite")

CLOUDINARY_CLOUD_NAME = os.getenv("FARMCONNECT_CLOUD_NAME", "dn5edjpzg")
CLOUDINARY_UPLOAD_PRESET = os.getenv("FARMCONNECT_UPLOAD_PRESET", "FarmConnect")
CLOUDINARY_UPLOAD_URL = (
    f"https://api.cloudinary.com/v1_1/{CLOUDINARY_CLOUD_NAME}/image/upload"
)

# persisted key-value entries
AUTH_STORAGE_KEY = "farmconnect-auth"
LANGUAGE_STORAGE_KEY = "farmconnect-language"

DEBUG = bool(os.getenv("DEBUG"))
