"""Development runner: python -m venueledger"""

import uvicorn

from venueledger.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "venueledger.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
