import asyncio
import logging

from flask import Blueprint, jsonify, request

from .plugin_registry import get_plugin_registry

logger = logging.getLogger(__name__)

blocks_bp = Blueprint('blocks', __name__)


@blocks_bp.route("/blocks/<plugin_name>/process", methods=["POST"])
def process_block(plugin_name):
    """Run a block through a plugin and return its reply envelope"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "No JSON data provided"}), 400

    block = data.get("block") or {}
    context = data.get("context") or {}
    conversation_id = data.get("conversation_id")

    registry = get_plugin_registry()
    try:
        envelope = asyncio.run(registry.run_block(plugin_name, block, context, conversation_id))
    except KeyError:
        return jsonify({"error": f"Unknown plugin: {plugin_name}"}), 404

    return jsonify(envelope), 200


@blocks_bp.route("/plugins", methods=["GET"])
def list_plugins():
    return jsonify(get_plugin_registry().get_plugin_info()), 200


@blocks_bp.route("/plugins/health", methods=["GET"])
def plugins_health():
    health = asyncio.run(get_plugin_registry().health_check_all())
    return jsonify(health), 200


@blocks_bp.route("/conversations/<conversation_id>", methods=["GET"])
def get_conversation(conversation_id):
    conversation = asyncio.run(get_plugin_registry().conversations.get(conversation_id))
    if conversation is None:
        return jsonify({"error": "Conversation not found"}), 404
    return jsonify(conversation), 200


@blocks_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint for monitoring services"""
    return {"status": "healthy", "service": "blockchat"}, 200
