"""Raw content API payloads used by the content tests."""


def comment(cid, body, author="someone", depth=0, parent="t3_p1", replies=None, **extra):
    data = {
        "id": cid,
        "author": author,
        "body": body,
        "score": 5,
        "created_utc": 1_700_000_000.5,
        "depth": depth,
        "parent_id": parent,
        "replies": "" if replies is None else {"kind": "Listing", "data": {"children": replies}},
        "stickied": False,
        "score_hidden": False,
    }
    data.update(extra)
    return {"kind": "t1", "data": data}


POST = {
    "id": "p1",
    "title": "Interesting post title",
    "author": "op",
    "subreddit": "python",
    "selftext": "Self text body",
    "url": "https://i.redd.it/x.gif",
    "thumbnail": "self",
    "score": 42,
    "num_comments": 3,
    "created_utc": 1_700_000_000,
    "is_video": False,
    "post_hint": "image",
    "domain": "i.redd.it",
    "permalink": "/r/python/comments/p1/interesting/",
    "stickied": False,
    "over_18": False,
}


def comments_payload(children):
    return [
        {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": POST}]}},
        {"kind": "Listing", "data": {"children": children}},
    ]
