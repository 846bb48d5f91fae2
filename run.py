import uvicorn
from main import app
from config import config

if __name__ == "__main__":
    # Display startup information with available command-line options
    print("\n" + "="*60)
    print("Fitness Session Backend")
    print("="*60)
    print(f"Mode: {config.mode_description}")
    print(f"Lead-in countdown: {config.lead_in_seconds}s")
    print("\nAvailable modes:")
    print("  python run.py --mode debug         # Debug with session transcripts")
    print("  python run.py --mode debug_no_save # Debug without transcripts")
    print("  python run.py --mode non_debug     # Minimal logging only")
    print("  python run.py --lead-in 0          # Start exercising without the 3-2-1")
    print("="*60 + "\n")

    # Start FastAPI server with CORS enabled for cross-origin requests
    uvicorn.run(app, host="0.0.0.0", port=8000)
