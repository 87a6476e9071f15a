from scorebook.views.game_handlers import (
    get_game as get_game,
)
from scorebook.views.game_handlers import (
    list_games as list_games,
)
from scorebook.views.game_handlers import (
    record_game as record_game,
)
from scorebook.views.player_handlers import (
    create_player as create_player,
)
from scorebook.views.player_handlers import (
    delete_player as delete_player,
)
from scorebook.views.player_handlers import (
    get_player as get_player,
)
from scorebook.views.player_handlers import (
    list_player_games as list_player_games,
)
from scorebook.views.player_handlers import (
    list_players as list_players,
)
from scorebook.views.player_handlers import (
    update_player as update_player,
)
