from flask import Flask, request, jsonify, make_response
from flask_cors import CORS
from splitter import RosterStore, SettlementProcessor
from splitter.store import DEFAULT_ROSTER_PATH, EXPORT_FILENAME
from splitter.validators import ROSTER_FIELDS
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the roster UI runs on a different origin)
CORS(app)

# Initialize the settlement processor and the roster store
processor = SettlementProcessor(tolerance=os.environ.get("SETTLEMENT_TOLERANCE", "0.01"))
store = RosterStore(os.environ.get("ROSTER_PATH", DEFAULT_ROSTER_PATH))


def _roster_response(roster, status=200):
    return jsonify({"participants": [p.to_dict() for p in roster]}), status


def _validation_error(e):
    logger.error(f"Validation error: {str(e)}")
    return jsonify({
        "error": str(e),
        "status": "validation_failed"
    }), 400


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Party Split Settlement API",
        "version": "1.0",
        "endpoints": {
            "settle": "/settle [POST]",
            "roster": "/roster [GET, PUT]",
            "participants": "/roster/participants [POST], /roster/participants/<index> [PATCH, DELETE]",
            "toggle": "/roster/participants/<index>/toggle [POST]",
            "clear_spent": "/roster/clear_spent [POST]",
            "import": "/roster/import [POST]",
            "export": "/roster/export [GET]",
            "settle_roster": "/roster/settle [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/settle", methods=["POST"])
def settle():
    """
    Settle a roster posted as an array of participant records
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if input_data is None:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        logger.info(f"Settling roster of {len(input_data) if isinstance(input_data, list) else 0} participants")

        result = processor.process_from_dict(input_data)

        logger.info(f"Settlement computed: {result['summary']['transfer_count']} transfers")

        return jsonify(result), 200

    except ValueError as e:
        return _validation_error(e)

    except Exception as e:
        logger.error(f"Settlement error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during settlement",
            "status": "failed"
        }), 500


# =============================================================================
# ROSTER
# =============================================================================

@app.route("/roster", methods=["GET"])
def get_roster():
    return _roster_response(store.snapshot())


@app.route("/roster", methods=["PUT"])
def put_roster():
    """Replace the whole roster"""
    data = request.get_json(force=True, silent=True)
    try:
        roster = store.import_records(data)
    except ValueError as e:
        return _validation_error(e)
    return _roster_response(roster)


@app.route("/roster/participants", methods=["POST"])
def add_participant():
    data = request.get_json(force=True, silent=True) or {}
    if not isinstance(data, dict):
        return _validation_error(ValueError("Participant must be an object"))
    try:
        roster = store.add_participant(**{k: v for k, v in data.items() if k in ROSTER_FIELDS})
    except ValueError as e:
        return _validation_error(e)
    return _roster_response(roster, 201)


@app.route("/roster/participants/<int:index>", methods=["PATCH"])
def update_participant(index):
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return _validation_error(ValueError("Participant changes must be an object"))
    try:
        roster = store.update_participant(index, **data)
    except (ValueError, TypeError) as e:
        return _validation_error(e)
    return _roster_response(roster)


@app.route("/roster/participants/<int:index>/toggle", methods=["POST"])
def toggle_participant(index):
    try:
        roster = store.toggle_participant(index)
    except ValueError as e:
        return _validation_error(e)
    return _roster_response(roster)


@app.route("/roster/participants/<int:index>", methods=["DELETE"])
def delete_participant(index):
    try:
        roster = store.delete_participant(index)
    except ValueError as e:
        return _validation_error(e)
    return _roster_response(roster)


@app.route("/roster/clear_spent", methods=["POST"])
def clear_spent():
    return _roster_response(store.clear_spent())


@app.route("/roster/export", methods=["GET"])
def export_roster():
    """Download the roster document"""
    response = make_response(store.export_document())
    response.headers['Content-Type'] = 'application/json'
    response.headers['Content-Disposition'] = f'attachment; filename={EXPORT_FILENAME}'
    return response


@app.route("/roster/import", methods=["POST"])
def import_roster():
    """Import a roster document; the current roster survives a bad upload"""
    upload = request.files.get("file")
    try:
        text = upload.read().decode("utf-8") if upload else request.get_data(as_text=True)
        roster = store.import_document(text)
    except ValueError as e:
        return _validation_error(e)
    logger.info(f"Roster imported: {len(roster)} participants")
    return _roster_response(roster)


@app.route("/roster/settle", methods=["POST"])
def settle_roster():
    """Settle the stored roster"""
    result = store.settle(processor)
    logger.info(f"Stored roster settled: {result['summary']['transfer_count']} transfers")
    return jsonify(result), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
