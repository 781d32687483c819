"""
Run the FX Helper backend server.
"""
import os

# Load environment
from dotenv import load_dotenv

base_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(base_dir, ".env"))

# Run uvicorn
import uvicorn

if __name__ == "__main__":
    print("Starting FX Helper Backend Server...")
    print("API Docs: http://localhost:8000/docs")
    print("-" * 50)

    uvicorn.run(
        "fxhelper.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
        log_level="info",
    )
