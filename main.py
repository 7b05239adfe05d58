from flask import Flask, request, jsonify
from flask_cors import CORS
from deal_engine import DealProcessor, load_catalog
import os
import logging

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the desk UI calls the API from another origin)
CORS(app)

# Lender catalog is loaded once and shared read-only by every request
processor = DealProcessor(load_catalog(os.environ.get("LENDERS_FILE")))


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Deal Structuring Engine API",
        "version": "1.0",
        "lenders": len(processor.catalog),
        "endpoints": {
            "analyze_deal": "/analyze_deal [POST]",
            "calculate_profit": "/calculate_profit [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _handle(operation, label):
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        score = input_data.get("creditScore", "Unknown") if isinstance(input_data, dict) else "Unknown"
        logger.info(f"{label}: credit score {score}")

        result = operation(input_data)

        logger.info(f"{label} completed")

        return jsonify(result), 200

    except (ValueError, KeyError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": f"Validation error: {str(e)}",
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/analyze_deal", methods=["POST"])
def analyze_deal():
    """Rank every eligible lender's structure for a deal"""
    return _handle(processor.analyze_from_dict, "Analyzing deal")


@app.route("/calculate_profit", methods=["POST"])
def calculate_profit():
    """Profit-optimize the best-ranked structure for a deal"""
    return _handle(processor.optimize_from_dict, "Optimizing deal profit")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
