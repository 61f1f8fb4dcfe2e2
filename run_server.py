import uvicorn
import os

if __name__ == "__main__":
    host = os.environ.get("ACTIVITY_DNA_HOST", "0.0.0.0")
    port = int(os.environ.get("ACTIVITY_DNA_PORT", "8000"))

    print("Starting Activity DNA API Server...")
    print(f"Docs available at: http://localhost:{port}/docs")

    uvicorn.run(
        "activity_dna.api.server:app",
        host=host,
        port=port,
        reload=True
    )
