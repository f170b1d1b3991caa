from flask import Blueprint, jsonify

from trivia import get_service

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the trivia server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'questions': len(get_service().bank)})
