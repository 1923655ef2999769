from flask import Blueprint

import controllers as ctrl

api = Blueprint("api", __name__)

# reads
api.add_url_rule("/candidates", view_func=ctrl.get_candidates, methods=["GET"])
api.add_url_rule("/status", view_func=ctrl.status, methods=["GET"])
api.add_url_rule("/results", view_func=ctrl.get_results, methods=["GET"])
api.add_url_rule("/has-voted/", view_func=ctrl.has_voted, methods=["GET"], endpoint="has_voted_missing")
api.add_url_rule("/has-voted/<address>", view_func=ctrl.has_voted, methods=["GET"])

# admin actions (these create on-chain txs)
api.add_url_rule("/add-candidate", view_func=ctrl.add_candidate, methods=["POST"])
api.add_url_rule("/authorize", view_func=ctrl.authorize_voter, methods=["POST"])
api.add_url_rule("/end", view_func=ctrl.end_election, methods=["POST"])
api.add_url_rule("/restart", view_func=ctrl.restart_election, methods=["POST"])
api.add_url_rule("/set-restart-password", view_func=ctrl.set_restart_password, methods=["POST"])

api.add_url_rule("/vote", view_func=ctrl.cast_vote, methods=["POST"])
