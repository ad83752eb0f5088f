"""
PyRedux 範例：待辦事項應用，展示 reducer 組合、中介軟體與狀態訂閱
"""

import logging
import uuid
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from immutables import Map
from reactivex import operators as ops

from pyredux import (
    UNDEFINED,
    LoggerMiddleware,
    apply_middleware,
    bind_action_creators,
    combine_reducers,
    create_action,
    create_reducer,
    create_store,
    on,
)


# ====== 1. 定義 Actions ======
add_todo = create_action("addTodo", lambda text: text)
toggle_todo = create_action("toggleTodo", lambda id: id)
remove_todo = create_action("removeTodo", lambda id: id)
set_filter = create_action("setFilter", lambda name: name)


# ====== 2. 定義 Reducers ======
def handle_add_todo(state, action):
    todo = Map(id=str(uuid.uuid4()), text=action["payload"], completed=False)
    return state + (todo,)


def handle_toggle_todo(state, action):
    return tuple(
        todo.set("completed", not todo["completed"]) if todo["id"] == action["payload"] else todo
        for todo in state
    )


def handle_remove_todo(state, action):
    return tuple(todo for todo in state if todo["id"] != action["payload"])


todos_reducer = create_reducer(
    (),
    on(add_todo, handle_add_todo),
    on(toggle_todo, handle_toggle_todo),
    on(remove_todo, handle_remove_todo),
)


def filter_reducer(state=UNDEFINED, action=None):
    if state is UNDEFINED:
        state = "all"
    if action["type"] == set_filter.type:
        return action["payload"]
    return state


root_reducer = combine_reducers({"todos": todos_reducer, "filter": filter_reducer})


# ====== 3. 定義中介軟體 ======
class MaxTodosMiddleware:
    """超過上限時攔截新增的待辦事項。"""

    def __init__(self, limit: int = 3):
        self.limit = limit

    def __call__(self, api):
        def middleware(next_dispatch):
            def dispatch(action):
                if action["type"] == add_todo.type and len(api.get_state()["todos"]) >= self.limit:
                    print(f"[提示] 待辦事項已達上限 {self.limit}，忽略: {action['payload']}")
                    return action
                return next_dispatch(action)
            return dispatch
        return middleware


# ====== 4. 建立 Store ======
def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    store = create_store(root_reducer, apply_middleware(MaxTodosMiddleware, LoggerMiddleware))
    actions = bind_action_creators(
        {"add": add_todo, "toggle": toggle_todo, "remove": remove_todo, "filter": set_filter},
        store.dispatch,
    )

    store.select(lambda state: len(state["todos"])).subscribe(
        lambda count: print(f"📋 待辦事項數量: {count}")
    )
    store.select(lambda state: state["filter"]).pipe(ops.skip(1)).subscribe(
        lambda name: print(f"🔎 篩選條件: {name}")
    )

    for text in ("買牛奶", "寫報告", "繳帳單", "打電話"):
        actions["add"](text)

    first = store.get_state()["todos"][0]
    actions["toggle"](first["id"])
    actions["filter"]("completed")
    actions["remove"](first["id"])

    store.teardown()


if __name__ == "__main__":
    main()
