import uvicorn

from shared.core.config import settings

if __name__ == "__main__":
    try:
        uvicorn.run(
            "pantry_service.app.main:app",
            host="0.0.0.0",
            port=8002,
            reload=settings.is_development,
        )
    except KeyboardInterrupt:
        print("\nShutting down server...")
