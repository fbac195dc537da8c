import os
import sys
import unittest
import warnings
from altair.utils.deprecation import AltairDeprecationWarning

warnings.simplefilter("ignore", AltairDeprecationWarning)

from streamlit.testing.v1 import AppTest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from selection import Phase


class StreamlitAppTest(unittest.TestCase):
    def setUp(self) -> None:
        self.yaml_path = "test_settings.yaml"
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        os.environ["YAML_PATH"] = self.yaml_path
        # nothing listens on the discard port
        os.environ["API_URL"] = "http://127.0.0.1:9"
        script = os.path.join(os.path.dirname(os.path.dirname(__file__)), "streamlit_app.py")
        self.at = AppTest.from_file(script, default_timeout=20)
        self.at.run()

    def tearDown(self) -> None:
        os.environ.pop("YAML_PATH", None)
        os.environ.pop("API_URL", None)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def test_unreachable_store_shows_notice(self) -> None:
        self.assertFalse(self.at.exception)
        self.assertTrue(any("Whoops!" in e.value for e in self.at.error))
        select = self.at.selectbox(key="exercise_select")
        self.assertEqual(select.options, ["Select an exercise", "+ New exercise"])

    def test_new_exercise_panel(self) -> None:
        self.at.selectbox(key="exercise_select").select_index(1).run()
        controller = self.at.session_state["log_controller"]
        self.assertEqual(controller.phase, Phase.CREATING_EXERCISE)
        self.at.text_input(key="new_exercise_name").input("Overhead Press").run()
        self.at.button(key="confirm_exercise").click().run()
        controller = self.at.session_state["log_controller"]
        self.assertEqual(controller.phase, Phase.VIEWING)
        self.assertEqual(controller.state.selected_key, "overhead_press")
        self.assertEqual(controller.state.points, [])
        self.assertFalse(self.at.exception)


if __name__ == "__main__":
    unittest.main()
