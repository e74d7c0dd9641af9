from index import main_bp
from routes.auth import auth_bp
from routes.master import master_bp
from routes.item import item_bp
from routes.stock import stock_bp
from routes.hq_issuance import hq_bp
from routes.district_issuance import district_bp
from routes.loan import loan_bp
from routes.errors import register_error_handlers


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(master_bp)
    app.register_blueprint(item_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(hq_bp)
    app.register_blueprint(district_bp)
    app.register_blueprint(loan_bp)
    register_error_handlers(app)
