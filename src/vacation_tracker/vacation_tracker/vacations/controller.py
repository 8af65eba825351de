from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.controller import make_auth_required
from ..common.datetime_utils import require_iso_date
from ..common.http import json_body
from ..container import Container
from ..core.constants import API_PREFIX


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)
    service = container.vacation_service

    @app.route(f"{API_PREFIX}/vacations", methods=["POST"], endpoint="create_vacation")
    @auth_required
    def create_vacation():
        body = json_body()
        start_date = require_iso_date(body.get("startDate"), "startDate")
        end_date = require_iso_date(body.get("endDate"), "endDate")

        vacation = service.create(current_user=g.current_user, start_date=start_date, end_date=end_date)
        return jsonify(service.to_response(vacation)), 201

    @app.route(f"{API_PREFIX}/vacations", methods=["GET"], endpoint="list_vacations")
    @auth_required
    def list_vacations():
        vacations = service.list_visible(current_user=g.current_user)
        return jsonify(service.to_responses(vacations))

    @app.route(f"{API_PREFIX}/vacations/<int:vacation_id>", methods=["GET"], endpoint="get_vacation")
    @auth_required
    def get_vacation(vacation_id: int):
        vacation = service.get(current_user=g.current_user, vacation_id=vacation_id)
        return jsonify(service.to_response(vacation))

    @app.route(f"{API_PREFIX}/vacations/<int:vacation_id>/approve", methods=["PUT"], endpoint="approve_vacation")
    @auth_required
    def approve_vacation(vacation_id: int):
        vacation = service.approve(current_user=g.current_user, vacation_id=vacation_id)
        return jsonify(service.to_response(vacation))

    @app.route(f"{API_PREFIX}/vacations/<int:vacation_id>/reject", methods=["PUT"], endpoint="reject_vacation")
    @auth_required
    def reject_vacation(vacation_id: int):
        vacation = service.reject(current_user=g.current_user, vacation_id=vacation_id)
        return jsonify(service.to_response(vacation))

    @app.route(f"{API_PREFIX}/vacations/<int:vacation_id>", methods=["DELETE"], endpoint="delete_vacation")
    @auth_required
    def delete_vacation(vacation_id: int):
        service.delete(current_user=g.current_user, vacation_id=vacation_id)
        return "", 204
