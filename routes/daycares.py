from flask import Blueprint, jsonify, request

from services.daycare_service import DaycareService

daycares_bp = Blueprint('daycares', __name__)


def _respond(result):
    return jsonify(result.body), result.status_code


@daycares_bp.route('', methods=['GET'])
@daycares_bp.route('/', methods=['GET'])
def list_daycares():
    return _respond(DaycareService().list_all())


@daycares_bp.route('/search', methods=['GET'])
def search():
    return _respond(DaycareService().search(request.args))


@daycares_bp.route('/detail/<identifier>', methods=['GET'])
def detail(identifier):
    return _respond(DaycareService().get_by_id(identifier))


@daycares_bp.route('/locations/all', methods=['GET'])
def locations():
    return _respond(DaycareService().locations())


@daycares_bp.route('/regions/all', methods=['GET'])
def regions():
    return _respond(DaycareService().regions())


@daycares_bp.route('/cities/all', methods=['GET'])
def cities():
    return _respond(DaycareService().cities_by_region(request.args.get('region')))


@daycares_bp.route('/program-ages/all', methods=['GET'])
def program_ages():
    return _respond(DaycareService().program_ages())


@daycares_bp.route('/types/all', methods=['GET'])
def types():
    return _respond(DaycareService().types_by_region_and_city(
        request.args.get('region'), request.args.get('city')))


@daycares_bp.route('/stats/overview', methods=['GET'])
def stats():
    return _respond(DaycareService().stats())
