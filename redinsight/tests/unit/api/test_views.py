"""End-to-end tests for the HTML fragment routes, through the in-process proxy."""

import httpx
from fastapi.testclient import TestClient


class TestSectionRoutes:
    """Test cases for /ui/section/{section}."""

    def test_posts_section(self, make_app, reddit_routes, listing, thing, post_data):
        upstream = reddit_routes({"/top.json": listing(thing("t3", **post_data))})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/section/posts", params={"filter": "top", "time": "week"})

        assert response.status_code == 200
        assert response.headers["x-panel"] == "posts"
        assert response.headers["x-section"] == "posts"
        assert "Python 3.13 released" in response.text
        assert upstream.requests[0].url.params["t"] == "week"

    def test_users_section_is_prompt_only(self, make_app, reddit_routes):
        upstream = reddit_routes({})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/section/users")

        assert response.headers["x-panel"] == "users"
        assert "Enter a username to view their profile and posts" in response.text
        assert upstream.requests == []

    def test_unknown_section(self, make_app, reddit_routes):
        with TestClient(make_app(reddit_routes({}))) as client:
            response = client.get("/ui/section/settings")
        assert response.status_code == 400

    def test_invalid_filter(self, make_app, reddit_routes):
        with TestClient(make_app(reddit_routes({}))) as client:
            response = client.get("/ui/posts", params={"filter": "best"})
        assert response.status_code == 400
        assert response.json()["error"] == "HTTP error 400"


class TestContentRoutes:
    """Test cases for listings, search and detail fragments."""

    def test_subreddits(self, make_app, reddit_routes, listing, thing, community_data):
        upstream = reddit_routes({"/subreddits/new.json": listing(thing("t5", **community_data))})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/subreddits", params={"subreddits_filter": "new"})

        assert response.headers["x-panel"] == "subreddits"
        assert "r/python" in response.text

    def test_quick_search(self, make_app, reddit_routes, listing):
        upstream = reddit_routes({"/search.json": listing()})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/posts", params={"q": "nothing here"})

        assert "No posts found" in response.text
        assert upstream.requests[0].url.params["type"] == "link"

    def test_search_unknown_type(self, make_app, reddit_routes):
        with TestClient(make_app(reddit_routes({}))) as client:
            response = client.get("/ui/search", params={"q": "python", "type": "comments"})
        assert response.status_code == 400

    def test_user_profile_failure(self, make_app, reddit_routes, listing):
        upstream = reddit_routes({
            "/user/ghost/about.json": httpx.Response(404),
            "/user/ghost/submitted.json": listing(),
        })
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/users", params={"username": "ghost"})

        assert response.status_code == 200
        assert response.headers["x-panel"] == "users"
        assert "Failed to load user profile" in response.text

    def test_post_detail(self, make_app, reddit_routes, listing, thing, post_data, comment_data):
        permalink = post_data["permalink"]
        upstream = reddit_routes({
            permalink.rstrip("/") + ".json": [listing(thing("t3", **post_data)), listing(thing("t1", **comment_data))],
        })
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/post", params={"permalink": permalink})

        assert response.headers["x-panel"] == "modal"
        assert "Comments (1)" in response.text
        assert "Great release!" in response.text

    def test_open_community(self, make_app, reddit_routes, listing, thing, post_data):
        upstream = reddit_routes({"/r/python/hot.json": listing(thing("t3", **post_data))})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/community/python")

        assert response.headers["x-panel"] == "posts"
        assert response.headers["x-section"] == "posts"
        assert "Posts from r/python" in response.text
        assert [r.url.path for r in upstream.requests] == ["/r/python/hot.json"]


class TestSectionHeader:
    """Only navigation and opening a community tell the browser to switch tabs."""

    def test_search_keeps_active_section(self, make_app, reddit_routes, listing):
        upstream = reddit_routes({"/search.json": listing()})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/search", params={"q": "python", "type": "posts", "section": "search"})

        assert response.headers["x-panel"] == "search"
        assert "x-section" not in response.headers

    def test_user_lookup_keeps_active_section(self, make_app, reddit_routes):
        with TestClient(make_app(reddit_routes({}))) as client:
            response = client.get("/ui/users", params={"username": "", "section": "users"})

        assert response.headers["x-panel"] == "users"
        assert "x-section" not in response.headers

    def test_subreddit_quick_search_keeps_active_section(self, make_app, reddit_routes, listing):
        upstream = reddit_routes({"/search.json": listing()})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/subreddits", params={"q": "py", "section": "subreddits"})

        assert response.headers["x-panel"] == "subreddits"
        assert "x-section" not in response.headers

    def test_community_from_search_switches_to_posts(self, make_app, reddit_routes, listing):
        upstream = reddit_routes({"/r/python/hot.json": listing()})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/community/python", params={"section": "search"})
        assert response.headers["x-section"] == "posts"

    def test_unknown_active_section(self, make_app, reddit_routes):
        with TestClient(make_app(reddit_routes({}))) as client:
            response = client.get("/ui/users", params={"section": "settings"})
        assert response.status_code == 400


class TestMalformedInput:
    """Test cases for bad upstream records and bad caller input."""

    def test_malformed_profile_renders_fallback_header(self, make_app, reddit_routes, listing, thing, user_data, post_data):
        upstream = reddit_routes({
            "/user/spez/about.json": thing("t2", **dict(user_data, link_karma="lots")),
            "/user/spez/submitted.json": listing(thing("t3", **post_data)),
        })
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/users", params={"username": "spez", "section": "users"})

        assert response.status_code == 200
        assert "Unable to load this item" in response.text
        assert "Python 3.13 released" in response.text
        assert "validation error" not in response.text

    def test_permalink_outside_reddit_paths_rejected(self, make_app, reddit_routes):
        upstream = reddit_routes({})
        with TestClient(make_app(upstream)) as client:
            response = client.get("/ui/post", params={"permalink": "/../../ui/post?permalink=x"})

        assert response.status_code == 400
        assert upstream.requests == []
