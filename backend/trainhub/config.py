# backend/trainhub/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/trainhub.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///trainhub.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploaded videos/images land in <UPLOAD_FOLDER>/videos and <UPLOAD_FOLDER>/images
    UPLOAD_FOLDER = os.environ.get(
        "UPLOAD_FOLDER",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "uploads"),
    )
    MAX_VIDEO_BYTES = 50 * 1024 * 1024
    MAX_IMAGE_BYTES = 10 * 1024 * 1024
    # Largest upload plus multipart overhead
    MAX_CONTENT_LENGTH = MAX_VIDEO_BYTES + 1024 * 1024

    MAX_INVENTORY_ITEMS = int(os.environ.get("MAX_INVENTORY_ITEMS", "1000"))

    # SearchUPCData barcode lookup; lookups are disabled without a key
    SEARCHUPCDATA_API_KEY = os.environ.get("SEARCHUPCDATA_API_KEY", "")
    BARCODE_API_URL = os.environ.get("BARCODE_API_URL", "https://searchupcdata.com/api/products")
    BARCODE_TIMEOUT_SECONDS = float(os.environ.get("BARCODE_TIMEOUT_SECONDS", "10"))

    # bcrypt cost; tests lower it to keep signups fast
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))
