from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from scoreboard.config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.boards import boards
    # Mount board routes under /api to match frontend API client
    flask_app.register_blueprint(boards, url_prefix='/api/boards')

    from scoreboard.api.calculator import calculator
    flask_app.register_blueprint(calculator, url_prefix='/api/calculator')

    # Register Socket.IO event handlers
    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('calculate')
    @click.option('--base', 'base_points', default=0.0, type=float, help='Base points.')
    @click.option('--bonus', 'bonuses', multiple=True, metavar='NAME=VALUE',
                  help='Bonus input, e.g. present=5 or candy_cane=2. Repeatable.')
    @click.option('--multiplier', default=1.0, type=float, help='Final multiplier.')
    def calculate_command(base_points, bonuses, multiplier):
        """Prints the standalone calculator total."""
        from scoreboard.services.scoring.calculator import CalculatorInput, calculate_total, format_total
        raw = {'base_points': base_points, 'multiplier': multiplier}
        for pair in bonuses:
            name, sep, value = pair.partition('=')
            if not sep:
                raise click.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint='--bonus')
            raw[f"{name.strip()}_bonus"] = value
        total = calculate_total(CalculatorInput.from_raw(raw))
        click.echo(format_total(total))

    @click.command('score-demo')
    def score_demo_command():
        """Plays one sample round on a throwaway board and prints the tally."""
        from scoreboard.services.scoring import ScoringEngine
        engine = ScoringEngine()
        engine.apply_house_edit(2, {'redGift': 2}, {'x4RedGift': 1})
        engine.toggle_color_bonus('red', 'redGift')
        engine.apply_color_delta('orange', {'blueOrn': 1})
        for idx, house in enumerate(engine.houses):
            click.echo(f"{house.name}: {' / '.join(engine.house_summary(idx))}")
        result = engine.run_scoring_round()
        click.echo(f"Round {result.round_number} total: {result.total}")

    flask_app.cli.add_command(calculate_command)
    flask_app.cli.add_command(score_demo_command)

    return flask_app
