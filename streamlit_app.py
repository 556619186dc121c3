"""
Streamlit UI for CineVault.
Renders the discover page and the three personal collections on top of the PageController.
All state lives in the controller; this file only draws it and forwards button clicks as actions.

Run UI:                streamlit run streamlit_app.py
Requires:              TMDB_API_KEY in the environment or a .env file
"""

# asyncio drives the controller's coroutines from Streamlit's synchronous script
import asyncio  # run controller actions
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import List, Optional  # type hints

# Console logging
from loguru import logger  # console logger

# Application core
from src.config import Settings  # runtime settings
from src.controller import PageController, build_controller  # page orchestration
from src.models import (  # action and view types
	CollectionName,
	GoToPage,
	MovieCard,
	OpenDetail,
	OpenTrailer,
	SortKey,
	Theme,
	ToggleFavorite,
	ToggleWatched,
	ToggleWatchlist,
	View,
)
from src.pagination import should_display  # hide bar on single pages
from src.query_state import year_options  # year filter choices

# Labels for sort options shown in the sidebar
SORT_LABELS = {
	SortKey.POPULARITY_DESC: "Most popular",
	SortKey.RELEASE_DATE_DESC: "Newest",
	SortKey.VOTE_AVERAGE_DESC: "Top rated",
}

# Extra CSS for the light theme (Streamlit's own theme stays dark-friendly)
LIGHT_CSS = "<style>.stApp { background-color: #f8fafc; color: #0f172a; }</style>"

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="CineVault", layout="wide")  # wide layout


def run(coro):
	"""Run one controller coroutine to completion."""
	return asyncio.run(coro)


@st.cache_resource(show_spinner=True)
def load_settings() -> Settings:
	return Settings.from_env()


def get_controller() -> PageController:
	"""One controller per browser session."""
	if "controller" not in st.session_state:
		settings = load_settings()
		if not settings.api_key:
			st.warning("TMDB_API_KEY is not set; catalog requests will fail.")
		controller = build_controller(settings)
		run(controller.start())
		st.session_state.controller = controller
		logger.info("[UI] Session controller initialized")
	return st.session_state.controller


controller = get_controller()

# Light theme is just extra CSS on top of the default look
if controller.theme is Theme.LIGHT:
	st.markdown(LIGHT_CSS, unsafe_allow_html=True)

# Main page title
st.title("🎬 CineVault")  # friendly header

# Sidebar contains navigation, theme and filters
with st.sidebar:
	counts = controller.badges()
	view_labels = {
		View.DISCOVER: "Discover",
		View.WATCHLIST: f"Watch Later ({counts[CollectionName.WATCHLIST]})",
		View.WATCHED: f"Watched ({counts[CollectionName.WATCHED]})",
		View.FAVORITES: f"Favorites ({counts[CollectionName.FAVORITES]})",
	}
	views = list(view_labels)
	chosen = st.radio("Go to", views, index=views.index(controller.view), format_func=lambda v: view_labels[v])
	if chosen is not controller.view:
		run(controller.switch_view(chosen))
		st.rerun()

	theme_label = "☀️ Light mode" if controller.theme is Theme.DARK else "🌙 Dark mode"
	if st.button(theme_label):
		controller.toggle_theme()
		st.rerun()

	if controller.view is View.DISCOVER:
		st.header("Filters")  # section label

		genre_choices: List[Optional[int]] = [None] + [g.id for g in controller.genres]
		genre_names = {g.id: g.name for g in controller.genres}
		genre = st.selectbox(
			"Genre",
			genre_choices,
			index=genre_choices.index(controller.state.genre_id) if controller.state.genre_id in genre_choices else 0,
			format_func=lambda g: "All genres" if g is None else genre_names.get(g, str(g)),
		)
		if genre != controller.state.genre_id:
			run(controller.set_genre(genre))
			st.rerun()

		year_choices: List[Optional[int]] = [None] + year_options()
		year = st.selectbox(
			"Year",
			year_choices,
			index=year_choices.index(controller.state.year) if controller.state.year in year_choices else 0,
			format_func=lambda y: "All years" if y is None else str(y),
		)
		if year != controller.state.year:
			run(controller.set_year(year))
			st.rerun()

		sorts = list(SORT_LABELS)
		sort = st.selectbox("Sort by", sorts, index=sorts.index(controller.state.sort), format_func=lambda s: SORT_LABELS[s])
		if sort is not controller.state.sort:
			run(controller.set_sort(sort))
			st.rerun()

		if st.button("Reset filters"):
			run(controller.reset_filters())
			st.rerun()

	narrow = st.toggle("Compact pagination", value=False, help="Show 3 page links instead of 5.")


def render_detail() -> None:
	"""Detail panel for the movie the user opened last."""
	details = st.session_state.get("details")
	if details is None:
		return
	with st.container(border=True):
		c1, c2 = st.columns([1, 3])
		with c1:
			if details.poster_url:
				st.image(details.poster_url, width='stretch')
		with c2:
			st.subheader(f"{details.movie.title} ({details.year_label})")
			if details.tagline:
				st.caption(details.tagline)
			st.write(f"Genres: {details.genres_label}")
			st.write(f"Director: {details.director}")
			st.write(f"Rating: {details.rating_label}/10")
			st.write(details.movie.overview or "No description available.")
			if details.providers:
				st.write("Available on: " + ", ".join(p.provider_name for p in details.providers))
		if st.button("Close details"):
			st.session_state.details = None
			st.rerun()


def render_card(card: MovieCard, key_prefix: str) -> None:
	"""One movie row: poster, text and the action buttons."""
	movie = card.movie
	c1, c2 = st.columns([1, 4])  # small image column + large text column
	with c1:
		if card.poster_url:
			st.image(card.poster_url, width='stretch')  # poster
		else:
			st.caption("No image")
	with c2:
		st.subheader(f"{movie.title} ({card.year_label})")  # title + year
		st.caption(f"⭐ {card.rating_label}/10")
		st.write(movie.overview or "No description available.")
		b1, b2, b3, b4, b5 = st.columns(5)
		actions = [
			(b1, "Details", OpenDetail(movie.id)),
			(b2, "Remove from Watch Later" if card.in_watchlist else "Add to Watch Later", ToggleWatchlist(movie.id)),
			(b3, "Remove from Favorites" if card.in_favorites else "Add to Favorites", ToggleFavorite(movie.id)),
			(b4, "Remove from Watched" if card.in_watched else "Add to Watched", ToggleWatched(movie.id)),
			(b5, "Watch Trailer", OpenTrailer(movie.id)),
		]
		for column, label, action in actions:
			with column:
				if st.button(label, key=f"{key_prefix}-{type(action).__name__}-{movie.id}"):
					result = run(controller.dispatch(action))
					if isinstance(action, OpenDetail):
						if result is None:
							st.error("Details are not available right now.")
						else:
							st.session_state.details = result
							st.rerun()
					elif isinstance(action, OpenTrailer):
						if result.available:
							st.link_button("▶ Open trailer on YouTube", result.url)
						else:
							st.warning(result.message)
					else:
						st.rerun()
	st.divider()  # separator


def render_pagination() -> None:
	if not should_display(controller.state.total_pages):
		return
	directives = controller.pagination(3 if narrow else None)
	cols = st.columns(len(directives))
	for i, (col, d) in enumerate(zip(cols, directives)):
		with col:
			if d.kind == "ellipsis":
				st.write("…")
				continue
			label = {"prev": "«", "next": "»"}.get(d.kind, str(d.number))
			disabled = d.disabled or d.is_current
			if st.button(label, key=f"page-{i}-{d.kind}-{d.number}", disabled=disabled, type="primary" if d.is_current else "secondary"):
				run(controller.dispatch(GoToPage(d.number)))
				st.rerun()


render_detail()

if controller.view is View.DISCOVER:
	# Main text input; submitting runs the query right away
	query = st.text_input("Search movies", value=controller.state.query, placeholder="e.g., Inception")
	if query.strip() != controller.state.query:
		with st.spinner("Searching..."):
			run(controller.search(query))
		st.rerun()

if not controller.cards:
	if controller.view is View.DISCOVER:
		st.info("No movies found. Try adjusting your search or filter criteria.")
	else:
		st.info("Nothing here yet. Add movies from the Discover page.")
else:
	for card in controller.cards:
		render_card(card, controller.view.value)
	if controller.view is View.DISCOVER:
		render_pagination()
