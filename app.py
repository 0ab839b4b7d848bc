#!/usr/bin/env python3
"""
Flask Web Application for Segment Analyzer
Provides REST API endpoints that turn trace segments into topology and metric records.
"""

from flask import Flask, request, jsonify
from werkzeug.utils import secure_filename
import os
import tempfile
import json
from segment_analyzer import SegmentAnalyzer, TraceServiceConfig
from segment_analyzer.core.exceptions import InventoryLookupError, SegmentFormatError
from segment_analyzer.processors import SegmentFileProcessor
from segment_analyzer.storage import InMemorySourceReceiver, InventoryCaches
from segment_analyzer.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024
app.config['UPLOAD_FOLDER'] = tempfile.gettempdir()

ALLOWED_EXTENSIONS = {'json'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def build_config(options):
    """Build a TraceServiceConfig from request options; raises ValueError or TypeError on bad input."""
    max_length = options.get('max_slow_sql_length')
    thresholds = options.get('slow_db_threshold')
    return TraceServiceConfig(
        max_slow_sql_length=int(max_length) if max_length not in (None, '') else 2000,
        db_latency_thresholds=thresholds or None
    )


def run_analysis(caches, config, process):
    """Run `process` against a fresh analyzer and map failures to HTTP responses."""
    receiver = InMemorySourceReceiver()
    analyzer = SegmentAnalyzer(caches, config, receiver)
    try:
        process(analyzer)
    except InventoryLookupError as e:
        return jsonify({'error': f'Unresolvable identity: {e}'}), 422
    except SegmentFormatError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return jsonify({'error': str(e)}), 500
    return jsonify(prepare_results(analyzer, receiver.records))


@app.route('/api/analyze', methods=['POST'])
def analyze_api():
    """
    API endpoint to analyze an uploaded segment file.
    Accepts: multipart/form-data with fields:
      - 'file': segment JSON file ({"segments": [...]})
      - 'inventory': inventory JSON file (services, serviceInstances, endpoints)
      - 'max_slow_sql_length': integer (optional, default: 2000)
      - 'slow_db_threshold': 'type:millis,...' (optional, default: 'default:200,mongodb:100')
    Returns: JSON with analysis results
    """
    if 'file' not in request.files or 'inventory' not in request.files:
        return jsonify({'error': 'Both a segment file and an inventory file are required'}), 400

    file = request.files['file']
    inventory = request.files['inventory']

    if not file.filename or not inventory.filename:
        return jsonify({'error': 'No file selected'}), 400

    if not allowed_file(file.filename) or not allowed_file(inventory.filename):
        return jsonify({'error': 'Invalid file type. Only JSON files are allowed.'}), 400

    try:
        config = build_config(request.form)
        caches = InventoryCaches.from_dict(json.load(inventory.stream))
    except (ValueError, TypeError, SegmentFormatError) as e:
        return jsonify({'error': str(e)}), 400

    filename = secure_filename(file.filename)
    filepath = os.path.join(app.config['UPLOAD_FOLDER'], filename)
    file.save(filepath)
    try:
        return run_analysis(caches, config, lambda analyzer: analyzer.process_segment_file(filepath))
    finally:
        os.remove(filepath)


@app.route('/api/segments', methods=['POST'])
def analyze_segments():
    """
    API endpoint to analyze segments posted as JSON.
    Accepts: application/json body:
      {"inventory": {...}, "segments": [...], "config": {"max_slow_sql_length": 2000,
                                                          "slow_db_threshold": "default:200"}}
    Returns: JSON with analysis results
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or 'segments' not in payload:
        return jsonify({'error': 'Expected a JSON object with "segments"'}), 400

    try:
        config = build_config(payload.get('config') or {})
        caches = InventoryCaches.from_dict(payload.get('inventory') or {})
        segments = [SegmentFileProcessor.parse_segment(s) for s in payload['segments']]
    except (ValueError, TypeError, SegmentFormatError) as e:
        return jsonify({'error': str(e)}), 400

    return run_analysis(caches, config, lambda analyzer: analyzer.process_segments(segments))


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
