import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file before importing the app
load_dotenv()

# Now it's safe to import the app and settings
from app.main import app  # noqa: E402,F401

if __name__ == "__main__":
    # When running directly, use uvicorn to serve the app
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
