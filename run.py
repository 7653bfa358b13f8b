"""
Quick start script for running the Desviciar backend
"""
import uvicorn
from desviciar.config import settings

if __name__ == "__main__":
    print("=" * 70)
    print("🚀 Starting Desviciar Backend API")
    print("=" * 70)
    print(f"📍 Host: {settings.HOST}:{settings.PORT}")
    print(f"🔥 Firebase project: {settings.FIREBASE_PROJECT_ID or '(from credentials)'}")
    print(f"📚 API Docs: http://{settings.HOST}:{settings.PORT}/docs")
    print(f"🔧 Debug: {settings.DEBUG}")
    print("=" * 70)

    uvicorn.run(
        "desviciar.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
