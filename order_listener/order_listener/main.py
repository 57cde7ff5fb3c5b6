"""Main entry point for the Order Listener."""

import uvicorn

from order_listener.server import app

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
