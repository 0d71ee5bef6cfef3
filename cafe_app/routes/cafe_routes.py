from flask import Blueprint
from cafe_app.utils.auth import require_auth, require_cafe_manager
from cafe_app.controllers.cafe_controller import (
    tomorrow_handler,
    vote_handler,
    my_vote_handler,
    today_handler,
    status_handler,
    post_menu_handler,
    update_option_handler,
    delete_option_handler,
    upload_image_handler,
    vote_counts_handler,
    close_voting_handler,
    decide_tie_handler,
    history_handler,
    decisions_handler,
)
from cafe_app.controllers.suggestion_controller import (
    list_suggestions_handler,
    create_suggestion_handler,
    upvote_handler,
    remove_upvote_handler,
    open_suggestions_handler,
    close_suggestions_handler,
    delete_suggestion_handler,
)

cafe_bp = Blueprint("cafe", __name__, url_prefix="/api/cafe")

# Voting (all authenticated users)

@cafe_bp.get("/today")
@require_auth
def today():
    return today_handler()


@cafe_bp.get("/tomorrow")
@require_auth
def tomorrow():
    return tomorrow_handler()


@cafe_bp.post("/vote")
@require_auth
def vote():
    return vote_handler()


@cafe_bp.get("/my-vote")
@require_auth
def my_vote():
    return my_vote_handler()


@cafe_bp.get("/status")
@require_auth
def status():
    return status_handler()


# Suggestions

@cafe_bp.get("/suggestions")
@require_auth
def list_suggestions():
    return list_suggestions_handler()


@cafe_bp.post("/suggestions")
@require_auth
def create_suggestion():
    return create_suggestion_handler()


@cafe_bp.post("/suggestions/<int:id>/upvote")
@require_auth
def upvote(id):
    return upvote_handler(id)


@cafe_bp.delete("/suggestions/<int:id>/upvote")
@require_auth
def remove_upvote(id):
    return remove_upvote_handler(id)


# Chef only (ADMIN / CAFE)

@cafe_bp.post("/menu")
@require_cafe_manager
def post_menu():
    return post_menu_handler()


@cafe_bp.post("/menu/upload-image")
@require_cafe_manager
def upload_image():
    return upload_image_handler()


@cafe_bp.put("/menu/<int:id>")
@require_cafe_manager
def update_option(id):
    return update_option_handler(id)


@cafe_bp.delete("/menu/<int:id>")
@require_cafe_manager
def delete_option(id):
    return delete_option_handler(id)


@cafe_bp.get("/votes/count")
@require_cafe_manager
def vote_counts():
    return vote_counts_handler()


@cafe_bp.post("/close-voting")
@require_cafe_manager
def close_voting():
    return close_voting_handler()


@cafe_bp.post("/decide-tie")
@require_cafe_manager
def decide_tie():
    return decide_tie_handler()


@cafe_bp.get("/history")
@require_cafe_manager
def history():
    return history_handler()


@cafe_bp.get("/decisions/<menu_date>")
@require_cafe_manager
def decisions(menu_date):
    return decisions_handler(menu_date)


@cafe_bp.post("/suggestions/open")
@require_cafe_manager
def open_suggestions():
    return open_suggestions_handler()


@cafe_bp.post("/suggestions/close")
@require_cafe_manager
def close_suggestions():
    return close_suggestions_handler()


@cafe_bp.delete("/suggestions/<int:id>")
@require_cafe_manager
def delete_suggestion(id):
    return delete_suggestion_handler(id)
