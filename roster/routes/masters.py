"""
Master (admin) account routes.

Account creation is intentionally left without a gate to match the deployed
frontend's bootstrap flow; see DESIGN.md. Use `flask create-master` where the
open endpoint is not wanted.
"""

from flask import Blueprint, current_app, jsonify

from roster.auth import issue_master_token, master_token_required
from roster.extensions import limiter
from roster.records import authenticate_master, create_master, list_masters
from roster.utils.helpers import json_body

master_bp = Blueprint('masters', __name__, url_prefix='/apis/masters')


def _credentials():
    data = json_body()
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str):
        return None, None
    return username, password


@master_bp.route('', methods=['POST'])
def create_master_account():
    username, password = _credentials()
    if not username or not password:
        return jsonify(message="Username and password required"), 400

    master = create_master(username, password)
    current_app.logger.info(f"Master account created: {master.username}")
    return jsonify({
        'message': "Admin created successfully",
        'master': master.to_dict(),
    }), 201


@master_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def master_login():
    username, password = _credentials()
    master = authenticate_master(username, password) if username and password else None
    if master is None:
        current_app.logger.warning(f"Failed master login for {username!r}")
        return jsonify(message="Invalid username or password"), 400

    return jsonify({
        'message': "Login successful",
        'token': issue_master_token(master),
        'master': master.to_dict(),
    })


@master_bp.route('', methods=['GET'])
@master_token_required
def get_masters():
    return jsonify([master.to_dict() for master in list_masters()])
