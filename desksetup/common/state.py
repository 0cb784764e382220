"""
Install state management
"""

import json
from datetime import datetime
from pathlib import Path


class InstallState:
    """Records which applications desksetup installed, and which version"""

    def __init__(self, state_file):
        self.state_file = Path(state_file)
        self.state = self._load_state()

    def _load_state(self):
        """Load state from file"""
        try:
            with open(self.state_file, 'r') as f:
                return json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            # A truncated file is treated as empty and rewritten on the next save
            return {}

    def save_state(self):
        """Save state to file"""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, 'w') as f:
            json.dump(self.state, f, indent=2)

    def record_install(self, app, version, location=None):
        """Record a successful installation"""
        apps = self.state.setdefault('apps', {})
        apps[app] = {
            'version': version,
            'location': str(location) if location else None,
            'installed_at': datetime.now().isoformat(),
        }
        self.state['last_updated'] = datetime.now().isoformat()
        self.save_state()

    def get(self, app, default=None):
        """Get the record for an application"""
        return self.state.get('apps', {}).get(app, default)

    def all(self):
        return dict(self.state.get('apps', {}))

    def clear(self):
        """Clear all state"""
        self.state = {}
        self.save_state()
