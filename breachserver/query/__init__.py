"""HTTP layer: storage wiring, routers and the FastAPI app."""
