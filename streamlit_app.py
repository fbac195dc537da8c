import asyncio
import datetime
import os
import warnings
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st
from altair.utils.deprecation import AltairDeprecationWarning

warnings.filterwarnings("ignore", category=AltairDeprecationWarning)

from algorithms import WeightConverter, format_ms
from client import AsyncExerciseClient
from config import load_settings
from errors import TrackerError
from exercise_labels import is_new_exercise
from localization import translator
from models import DataPoint
from nutrition import NutritionClient, calculate_calories
from selection import ExerciseLogController, Phase

_ = translator.gettext

METRIC_LABELS = {
    "weight": "Weight",
    "est_1rm": "Estimated 1RM",
    "volume": "Volume",
}


def _run(coro):
    return asyncio.run(coro)


class LogApp:
    """Streamlit application for the exercise log and food lookup."""

    def __init__(self, yaml_path: str = "settings.yaml") -> None:
        self.settings = load_settings(yaml_path)
        translator.set_language(self.settings.language)
        self.weight_unit = self.settings.weight_unit
        self.time_format = self.settings.time_format
        self.nutrition = NutritionClient.from_settings(self.settings)
        if "log_controller" not in st.session_state:
            store = AsyncExerciseClient(
                self.settings.api_url, self.settings.request_timeout
            )
            controller = ExerciseLogController(store)
            controller.state.metric = self.settings.metric
            _run(controller.load_exercises())
            st.session_state["log_controller"] = controller
        self.controller: ExerciseLogController = st.session_state["log_controller"]

    @property
    def display_unit(self) -> str:
        return st.session_state.get("display_unit", self.weight_unit)

    def run(self) -> None:
        st.title("Lift Log")
        with st.sidebar:
            st.radio(
                "Display unit",
                list(WeightConverter.UNITS),
                index=list(WeightConverter.UNITS).index(self.weight_unit),
                key="display_unit",
            )
        log_tab, diet_tab = st.tabs([_("Exercise Log"), _("Diet")])
        with log_tab:
            self._exercise_log_tab()
        with diet_tab:
            self._diet_tab()

    def _show_notices(self) -> None:
        for notice in self.controller.pop_notices():
            st.error(f"{notice.title} {notice.text}")

    # exercise log

    def _exercise_log_tab(self) -> None:
        self._show_notices()
        state = self.controller.state
        options = [None] + state.exercises.options()
        st.selectbox(
            _("Exercise"),
            options,
            format_func=lambda item: item.label if item else "Select an exercise",
            key="exercise_select",
            on_change=self._on_exercise_change,
        )
        phase = self.controller.phase
        if phase is Phase.CREATING_EXERCISE:
            self._new_exercise_panel()
        if state.selected is None:
            return
        st.radio(
            _("Metric"),
            list(METRIC_LABELS),
            index=list(METRIC_LABELS).index(state.metric),
            format_func=lambda m: METRIC_LABELS[m],
            horizontal=True,
            key="metric_select",
            on_change=self._on_metric_change,
        )
        if self.controller.loading:
            st.caption("Loading...")
        if state.points:
            self._history_chart(state.points)
        else:
            st.info(_("No entries yet"))
        if phase is Phase.INSPECTING:
            self._entry_detail_panel()
        elif phase is Phase.VIEWING:
            self._entry_form()
        st.button(_("Reload"), key="reload_history", on_click=self._on_reload)

    def _on_exercise_change(self) -> None:
        item = st.session_state.get("exercise_select")
        if item is None:
            return
        if is_new_exercise(item):
            if self.controller.phase in (Phase.IDLE, Phase.VIEWING):
                _run(self.controller.select(item))
            st.session_state["exercise_select"] = self.controller.state.selected
            return
        _run(self.controller.select(item))
        st.session_state.pop("handled_point", None)

    def _on_metric_change(self) -> None:
        _run(self.controller.set_metric(st.session_state["metric_select"]))

    def _on_reload(self) -> None:
        if self.controller.state.selected is not None:
            _run(self.controller.reload())

    def _history_chart(self, points: list[DataPoint]) -> None:
        by_label = {str(p.label): p for p in points}
        df = pd.DataFrame(
            {
                "x": [pd.to_datetime(p.x, unit="ms", utc=True) for p in points],
                "y": [p.y for p in points],
                "label": [str(p.label) for p in points],
                "set": [p.display_text or "" for p in points],
            }
        )
        pick = alt.selection_point(name="entry", fields=["label"], on="click")
        chart = (
            alt.Chart(df)
            .mark_circle(size=90)
            .encode(
                x=alt.X("x:T", title=_("Date")),
                y=alt.Y("y:Q", title=METRIC_LABELS[self.controller.state.metric]),
                tooltip=[alt.Tooltip("x:T", title=_("Date")), "set"],
            )
            .add_params(pick)
        )
        event = st.altair_chart(
            chart, use_container_width=True, on_select="rerun", key="history_chart"
        )
        label = _selected_label(event)
        if label is None:
            st.session_state.pop("handled_point", None)
            return
        if label == st.session_state.get("handled_point"):
            return
        st.session_state["handled_point"] = label
        point = by_label.get(label)
        if point is not None and self.controller.phase is Phase.VIEWING:
            _run(self.controller.click_point(point))
            st.rerun()

    def _entry_form(self) -> None:
        with st.form("entry_form"):
            st.text_input(_("Weight"), key="entry_weight", placeholder=_("Weight"))
            st.text_input(_("Reps"), key="entry_reps", placeholder=_("Reps"))
            st.text_input(_("Notes"), key="entry_notes", placeholder=_("Notes"))
            st.date_input(_("Date"), key="entry_date")
            st.form_submit_button(_("Add"), on_click=self._on_submit_entry)

    def _on_submit_entry(self) -> None:
        form = self.controller.state.form
        form.weight_text = st.session_state.get("entry_weight", "")
        form.reps_text = st.session_state.get("entry_reps", "")
        form.notes_text = st.session_state.get("entry_notes", "")
        day = st.session_state.get("entry_date") or datetime.date.today()
        now = datetime.datetime.now(datetime.timezone.utc)
        form.date = datetime.datetime.combine(day, now.timetz())
        if _run(self.controller.submit_entry()) is not None:
            st.session_state["entry_weight"] = form.weight_text
            st.session_state["entry_reps"] = form.reps_text
            st.session_state["entry_notes"] = form.notes_text
            st.session_state["entry_date"] = form.date.date()

    def _entry_detail_panel(self) -> None:
        entry = self.controller.state.inspected
        with st.container(border=True):
            weight = WeightConverter.format(
                entry.weight, self.display_unit, self.weight_unit
            )
            st.write(f"{_('Weight')}: {weight}")
            st.write(f"{_('Reps')}: {entry.reps}")
            st.write(f"{_('Date')}: {format_ms(entry.created_at, self.time_format)}")
            if entry.notes:
                st.write(f"{_('Notes')}: {entry.notes}")
            cols = st.columns(2)
            with cols[0]:
                st.button(_("Delete"), key="delete_entry", on_click=self._on_delete)
            with cols[1]:
                st.button(_("Close"), key="close_entry", on_click=self._on_close)

    def _on_delete(self) -> None:
        _run(self.controller.delete_inspected())

    def _on_close(self) -> None:
        if self.controller.phase in (Phase.INSPECTING, Phase.CREATING_EXERCISE):
            self.controller.close_modal()

    def _new_exercise_panel(self) -> None:
        with st.container(border=True):
            st.text_input(
                _("New exercise name"),
                key="new_exercise_name",
                placeholder="Enter new exercise name",
            )
            cols = st.columns(2)
            with cols[0]:
                st.button(_("Add"), key="confirm_exercise", on_click=self._on_confirm)
            with cols[1]:
                st.button(_("Close"), key="close_new_exercise", on_click=self._on_close)

    def _on_confirm(self) -> None:
        name = st.session_state.get("new_exercise_name", "")
        item = _run(self.controller.confirm_new_exercise(name))
        if item is not None:
            st.session_state["new_exercise_name"] = ""
            st.session_state["exercise_select"] = item

    # diet

    def _diet_tab(self) -> None:
        cols = st.columns([4, 1])
        with cols[0]:
            query = st.text_input(
                _("Search for food"), key="food_query", placeholder=_("Search for food")
            )
        with cols[1]:
            if st.button(_("Search"), key="food_search") and query:
                try:
                    st.session_state["food_options"] = self.nutrition.search_by_text(
                        query
                    )
                except TrackerError as e:
                    st.error(f"Whoops! {e}")
        for idx, option in enumerate(st.session_state.get("food_options", [])):
            brand = f" ({option.brand_name})" if option.brand_name else ""
            if st.button(f"{option.food_name}{brand}", key=f"food_option_{idx}"):
                if option.item_id:
                    self._lookup(lambda: self.nutrition.lookup_item(option.item_id))
        upc = st.text_input(_("Barcode"), key="food_upc")
        if st.button(_("Look up"), key="food_lookup") and upc:
            self._lookup(lambda: self.nutrition.lookup_by_barcode(upc))
        info = st.session_state.get("food_info")
        if info is not None:
            self._macro_calculator(info)

    def _lookup(self, fetch) -> None:
        try:
            st.session_state["food_info"] = fetch()
        except TrackerError as e:
            st.error(f"Whoops! {e}")

    def _macro_calculator(self, info) -> None:
        title = info.product_name
        if info.brand_name:
            title = f"{title} ({info.brand_name})"
        st.subheader(title)
        servings = st.number_input(
            _("Servings"), min_value=0.0, value=1.0, step=0.5, key="food_servings"
        )
        result = calculate_calories(info, servings)
        st.metric("Calories", result["total_calories"])
        requested = result["serving_info"]["requested"]
        st.caption(f"{requested['quantity']:g} {requested['unit']}")
        if info.calories_per_100g is not None:
            st.caption(f"{info.calories_per_100g} kcal / 100 g")
        if info.nutrients:
            st.table(
                pd.DataFrame(
                    {"nutrient": list(info.nutrients), "amount": list(info.nutrients.values())}
                )
            )


def _selected_label(event) -> Optional[str]:
    if not event:
        return None
    selection = event.get("selection") or {}
    picked = selection.get("entry") or []
    if not picked:
        return None
    label = picked[0].get("label")
    return None if label is None else str(label)


if __name__ == "__main__":
    yaml_path = os.environ.get("YAML_PATH", "settings.yaml")
    LogApp(yaml_path=yaml_path).run()
