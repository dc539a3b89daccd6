"""Run the dashboard with uvicorn: ``python -m weatherdash``."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run("weatherdash:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
