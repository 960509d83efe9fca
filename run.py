#!/usr/bin/env python3
"""
Bank Simulation Entry Point

Starts the FastAPI server with the demo portfolio.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from bank_simulation.api import run_server
from bank_simulation.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("🏦 Starting Bank Simulation...")
    print("💰 All interest calculations use Decimal precision")
    print(f"🌐 API available at: http://localhost:{config.api_port}")
    print(f"📚 Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\n👋 Shutting down Bank Simulation...")
