"""
Feature toggle routes.

Students' login and registration pages read the toggles with the student key;
only masters may change them.
"""

from flask import Blueprint, current_app, g, jsonify

from roster.auth import master_token_required, student_key_required
from roster.records import get_settings, update_settings
from roster.utils.helpers import json_body

settings_bp = Blueprint('settings', __name__, url_prefix='/apis/settings')


@settings_bp.route('', methods=['GET'])
@student_key_required
def read_settings():
    return jsonify(get_settings().to_dict())


@settings_bp.route('', methods=['PUT'])
@master_token_required
def write_settings():
    data = json_body()
    settings = update_settings(
        user_register=data.get('userRegister'),
        user_login=data.get('userLogin'),
    )
    current_app.logger.info(f"Settings updated by {g.master.get('username')}: {settings.to_dict()}")
    return jsonify({
        'message': "Settings updated successfully",
        'settings': settings.to_dict(),
    })
