#!/usr/bin/env python3
"""
Fire / Smoke Detector API Server
Upload one image, get the colour-rule verdict and its masks back as JSON.
"""

import os
import logging
import base64
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.utils import secure_filename

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.errors import DecodeFailure, InvalidImage
from models.detection_result import DetectionResult
from pipeline.detection import detect_fire, detect_smoke
from repositories.image_repository import ImageRepository

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

image_repository = ImageRepository()

logger = logging.getLogger(__name__)

DETECTORS = {"fire": detect_fire, "smoke": detect_smoke}


def mask_to_base64(mask) -> str:
    """Encode a Mask as a PNG data URL for JSON responses."""
    png = image_repository.encode_png(mask)
    return f"data:image/png;base64,{base64.b64encode(png).decode('utf-8')}"


def result_to_json(result: DetectionResult) -> dict:
    return {
        'kind': result.kind,
        'detected': bool(result.detected),
        'percent': float(result.percent),
        'threshold': float(result.threshold),
        'masks': {stage: mask_to_base64(mask) for stage, mask in result.masks.items()},
    }


@app.route('/api/detect', methods=['POST'])
def detect_image():
    """Run fire or smoke detection on an uploaded image."""
    if 'image' not in request.files:
        return jsonify({'success': False, 'message': 'No image provided'}), 400

    file = request.files['image']
    if file.filename == '':
        return jsonify({'success': False, 'message': 'No file selected'}), 400

    kind = request.form.get('kind', 'fire')
    if kind not in DETECTORS:
        return jsonify({'success': False, 'message': f'Unknown kind: {kind}'}), 400

    options = {}
    if request.form.get('threshold'):
        try:
            options['threshold'] = float(request.form['threshold'])
        except ValueError:
            return jsonify({'success': False, 'message': 'Threshold must be a number'}), 400

    filename = secure_filename(file.filename) or "upload"

    try:
        image = image_repository.decode(file.read(), path=filename)
        logger.info(f"Image loaded for {kind} detection: {image.pixels.shape}")
        result = DETECTORS[kind](image, **options)
    except (DecodeFailure, InvalidImage) as e:
        logger.error(f"Could not process upload {filename}: {e}")
        return jsonify({'success': False, 'message': str(e)}), 422

    return jsonify({'success': True, **result_to_json(result)})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Fire / Smoke Detector API is running',
        'detectors': sorted(DETECTORS),
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    print("🚀 Starting Fire / Smoke Detector API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    print("📋 Endpoints:")
    print("   POST /api/detect   (image, kind=fire|smoke, threshold)")
    print("   GET  /api/health")
    print("="*60)

    app.run(host=os.getenv("API_HOST", "0.0.0.0"), port=int(os.getenv("API_PORT", "5000")), debug=False)
