import os

import uvicorn
from dotenv import load_dotenv

# .env values are also exported to os.environ
load_dotenv()

from travelling_trip.main import create_app  # noqa: E402


app = create_app()


# -------------------------------------------------------------
# RUN LOCAL
# -------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") != "production",
    )
