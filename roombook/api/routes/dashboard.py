from flask import Blueprint, jsonify
from roombook.services.stats_service import StatsService
from roombook.utils.decorators import token_required, admin_required

dashboard_bp = Blueprint('dashboard', __name__)

@dashboard_bp.route('/stats', methods=['GET'])
@token_required
def get_stats(current_user):
    return jsonify(StatsService.get_dashboard_stats())

@dashboard_bp.route('/room-stats', methods=['GET'])
@token_required
@admin_required
def get_room_stats(current_user):
    return jsonify(StatsService.get_room_stats())
