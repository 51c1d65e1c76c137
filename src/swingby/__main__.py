import sys

from swingby.data.scenarios import DEFAULT_SCENARIO_KEY
from swingby.render.app import run_viewer

if __name__ == "__main__":
    run_viewer(scenario=sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SCENARIO_KEY)
