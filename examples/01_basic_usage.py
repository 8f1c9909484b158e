"""
Basic usage example of fastapi-traffic-simulator.

Demonstrates:
- Building the app with a fixed seed for a reproducible traffic run
- Collecting request records in memory instead of logging them
- Mounting the simulated routes next to your own
"""

from fastapi_traffic_simulator import (
    InMemorySink,
    Settings,
    configure_logging,
    create_app,
)

configure_logging("INFO", service_name="traffic-simulator-example")

records = InMemorySink()
app = create_app(settings=Settings(seed=2024), sink=records)


@app.get("/records")
async def list_records():
    """Records captured so far, newest last."""
    return [record.to_dict() for record in records.records]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)

    # Test with:
    # curl http://localhost:3000/health
    # curl http://localhost:3000/items/1
    # curl -X POST -H "Content-Type: application/json" -d '{"name": "x"}' \
    #   http://localhost:3000/items
    # curl http://localhost:3000/fanout
    # curl http://localhost:3000/records
