"""
Quick demo script to run the VoltStore backend locally.

This script starts a local server and shows how to request a kit.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting VoltStore Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:     GET   http://localhost:8000/health")
    print("   - Kit:              POST  http://localhost:8000/recommendations/kit")
    print("   - Rates:            GET   http://localhost:8000/rates")
    print("   - Refresh rates:    POST  http://localhost:8000/rates/refresh")
    print("   - Format a price:   GET   http://localhost:8000/rates/format?amount_eur=3300&currency=DKK")
    print("   - Language:         PUT   http://localhost:8000/preferences/language")
    print("   - API Docs:               http://localhost:8000/docs")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/recommendations/kit" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"object_type": "Business", "monthly_usage": "600+ kWh", '
          '"purpose": "Autonomy", "budget": "Optimal", "language": "da"}\'')
    print()
    print("Without GEMINI_API_KEY every kit comes from the fallback selector.")
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "voltstore.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
