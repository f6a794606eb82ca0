#!/usr/bin/env python3
"""
Roulette Pattern & Strategy Engine - Entry Point
Start the Flask API server.
"""

from config import HOST, PORT, DEBUG, HISTORY_LIMIT

from roulette_engine import create_app

app = create_app()

if __name__ == '__main__':
    print("=" * 60)
    print("  Roulette Pattern & Strategy Engine")
    print("=" * 60)
    print(f"  Server:    http://localhost:{PORT}")
    print(f"  History:   in-memory, last {HISTORY_LIMIT} spins")
    print(f"  Debug:     {DEBUG}")
    print("=" * 60)
    print()
    print("[Startup] Serving API, POST spins to /api/results")

    app.run(host=HOST, port=PORT, debug=DEBUG, use_reloader=False)
