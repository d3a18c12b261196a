"""
Comment thread assembly.

Comments are stored flat (``parent_id`` points at the comment being replied
to). Readers only ever see one level of nesting: every reply, including a
reply to a reply, is listed under the root comment that started the thread.
"""


def _find_root(comment_id, nodes, root_of):
    """Walk up the parent chain until a root (or an unknown parent) is reached."""
    path = []
    current = comment_id
    while current not in root_of:
        parent_id = nodes[current].get("parent_id")
        if parent_id is None or parent_id not in nodes or parent_id in path or parent_id == current:
            root_of[current] = current
            break
        path.append(current)
        current = parent_id

    root = root_of[current]
    for visited in path:
        root_of[visited] = root
    return root


def build_comment_thread(comments):
    """
    Turn a flat list of comment dicts (ascending by ``created_at``) into a
    list of root comments, each carrying a ``replies`` list.

    A comment whose ``parent_id`` is unknown is treated as a root.
    """
    # Pass 1: id -> node
    nodes = {}
    for comment in comments:
        node = dict(comment)
        node["replies"] = []
        nodes[node["id"]] = node

    # Pass 2: attach every node to its root
    root_of = {}
    roots = []
    for comment_id, node in nodes.items():
        root_id = _find_root(comment_id, nodes, root_of)
        if root_id == comment_id:
            roots.append(node)
        else:
            nodes[root_id]["replies"].append(node)

    return roots


def count_thread(roots):
    return sum(1 + len(root["replies"]) for root in roots)
