import uvicorn

from periodic_tables.config import settings

if __name__ == "__main__":
    # Start the server
    uvicorn.run(
        "periodic_tables.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower()
    )
