from flask import Blueprint, jsonify, request
from scoreboard.services.scoring.calculator import CalculatorInput, calculate_total, format_total


calculator = Blueprint('calculator', __name__)


@calculator.route('', methods=['POST'])
def calculate():
    """Sum base points and bonuses, then apply the multiplier.

    Every field is optional; unreadable numbers count as 0 and a missing or
    zero multiplier counts as 1.
    """
    inputs = CalculatorInput.from_raw(request.get_json(silent=True))
    total = calculate_total(inputs)
    return jsonify({
        'subtotal': inputs.subtotal,
        'multiplier': inputs.multiplier,
        'total': total,
        'display': format_total(total),
    })
