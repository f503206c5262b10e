from flask import Blueprint, current_app, jsonify, render_template

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return render_template('index.html')

@main.route('/countups/<int:countdown_id>')
def countdown_page(countdown_id):
    # The page fetches its data client-side; a missing id redirects home from the browser
    return render_template(
        'countdown.html',
        countdown_id=countdown_id,
        celebration_ms=current_app.config.get('CELEBRATION_DURATION_MS', 5000),
    )

@main.route('/health')
def health():
    return jsonify({'status': 'ok'})
