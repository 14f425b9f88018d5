from flask import Blueprint, jsonify
from flask_login import logout_user, login_required, current_user

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Courtside game server!'})

@main.route('/whoami')
def whoami():
    if current_user.is_authenticated:
        return jsonify({'role': 'admin', 'game_code': current_user.code})
    return jsonify({'role': 'viewer', 'game_code': None})

@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})
