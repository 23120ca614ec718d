"""
HTTP-граница календаря.

Отдает фиксированный список бронирований и возвращает обратно присланные
изменения. Ничего не сохраняет.
"""

from flask import Flask, jsonify, request

SAMPLE_BOOKING_SUMMARIES = [
    {
        "id": 1,
        "customer_name": "Steve Smith",
        "room": "101",
        "check_in": "2025-05-01",
        "check_out": "2025-05-03",
    },
    {
        "id": 2,
        "customer_name": "AB de Villiers",
        "room": "102",
        "check_in": "2025-05-02",
        "check_out": "2025-05-05",
    },
]


def create_app() -> Flask:
    """Создает Flask-приложение с маршрутами API бронирований."""
    app = Flask(__name__)

    @app.route("/bookings", methods=["GET"])
    def list_bookings():
        return jsonify(SAMPLE_BOOKING_SUMMARIES)

    @app.route("/bookings/<booking_id>", methods=["PUT"])
    def update_booking(booking_id):
        # Пока без БД: просто возвращаем присланные данные
        return jsonify(request.get_json(silent=True))

    return app
