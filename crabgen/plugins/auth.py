"""Authentication plugin.

Adds login/registration pages and an ``AuthProvider`` to the frontend, the
user/session/permission tables as a migration, and mounts the auth routes
on the backend.
"""

from __future__ import annotations

import textwrap

from crabgen.config import BackendDatabase, BackendFramework, BackendOrm
from crabgen.content.service import register_actix, register_poem
from crabgen.scaffolder.errors import UnsupportedOption
from crabgen.scaffolder.migrations import MigrationRequest
from crabgen.scaffolder.patcher import PatchSpec
from crabgen.scaffolder.templates import TemplateStore

from .base import InstallConfig, Plugin, PluginPlan

ASSET_PREFIX = "plugin_auth"

APP_IMPORTS = """\
import { useAuth, useAuthCheck } from './hooks/useAuth'
import { AccountPage } from './containers/AccountPage'
import { LoginPage } from './containers/LoginPage'
import { ActivationPage } from './containers/ActivationPage'
import { RegistrationPage } from './containers/RegistrationPage'
import { RecoveryPage } from './containers/RecoveryPage'
import { ResetPage } from './containers/ResetPage'"""

BUNDLE_IMPORTS = "import { AuthProvider } from '../src/hooks/useAuth'"

AUTH_ROUTES = """
          <Route path="/login" element={<LoginPage />} />
          <Route path="/recovery" element={<RecoveryPage />} />
          <Route path="/reset" element={<ResetPage />} />
          <Route path="/activate" element={<ActivationPage />} />
          <Route path="/register" element={<RegistrationPage />} />
          <Route path="/account" element={<AccountPage />} />"""

LEFT_NAV = """
          <a className="NavButton" onClick={() => navigate('/account')}>Account</a>"""

RIGHT_NAV = """
          { auth.isAuthenticated && <a className="NavButton" onClick={() => auth.logout()}>Logout</a> }
          { !auth.isAuthenticated && <a className="NavButton" onClick={() => navigate('/login')}>Login/Register</a> }"""

APP_HOOKS = """
  useAuthCheck()
  const auth = useAuth()"""

POSTGRES_UP = textwrap.dedent("""\
    CREATE TABLE users (
      id SERIAL PRIMARY KEY,
      email TEXT NOT NULL,
      hash_password TEXT NOT NULL,
      activated BOOL NOT NULL DEFAULT FALSE,
      created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
      updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );
    SELECT manage_updated_at('users');
    CREATE TABLE user_sessions (
      id SERIAL PRIMARY KEY,
      user_id SERIAL NOT NULL REFERENCES users(id),
      refresh_token TEXT NOT NULL,
      device TEXT,
      created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
      updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );
    SELECT manage_updated_at('user_sessions');
    CREATE TABLE user_permissions (
      user_id SERIAL NOT NULL REFERENCES users(id),
      permission TEXT NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (user_id, permission)
    );
    CREATE TABLE user_roles (
      user_id SERIAL NOT NULL REFERENCES users(id),
      role TEXT NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (user_id, role)
    );
    CREATE TABLE role_permissions (
      role TEXT NOT NULL,
      permission TEXT NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (role, permission)
    );
""")

SQLITE_UP = textwrap.dedent("""\
    CREATE TABLE users (
      id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
      email TEXT NOT NULL,
      hash_password TEXT NOT NULL,
      activated BOOLEAN NOT NULL DEFAULT FALSE,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    );
    CREATE TABLE user_sessions (
      id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
      user_id INTEGER NOT NULL REFERENCES users(id),
      refresh_token TEXT NOT NULL,
      device TEXT,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    );
    CREATE TABLE user_permissions (
      user_id INTEGER NOT NULL REFERENCES users(id),
      permission TEXT NOT NULL,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (user_id, permission)
    );
    CREATE TABLE user_roles (
      user_id INTEGER NOT NULL REFERENCES users(id),
      role TEXT NOT NULL,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (user_id, role)
    );
    CREATE TABLE role_permissions (
      role TEXT NOT NULL,
      permission TEXT NOT NULL,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
      PRIMARY KEY (role, permission)
    );
""")

DOWN = textwrap.dedent("""\
    DROP TABLE user_permissions;
    DROP TABLE role_permissions;
    DROP TABLE user_roles;
    DROP TABLE user_sessions;
    DROP TABLE users;
""")

UP_BY_DATABASE: dict[BackendDatabase, str] = {
    BackendDatabase.POSTGRES: POSTGRES_UP,
    BackendDatabase.SQLITE: SQLITE_UP,
}


class AuthPlugin(Plugin):
    """Email/password authentication with sessions, roles and permissions."""

    name = "auth"

    def plan(self, config: InstallConfig, store: TemplateStore) -> PluginPlan:
        if config.backend_orm is not BackendOrm.DIESEL:
            raise UnsupportedOption(
                f"The auth plugin does not support the {config.backend_orm.value} ORM yet"
            )

        layout = config.layout
        app, bundle = layout.app_file, layout.bundle_file

        patches = [
            PatchSpec.prepend(app, APP_IMPORTS),
            PatchSpec.prepend(bundle, BUNDLE_IMPORTS),
            PatchSpec.after_anchor(app, "const App = () => {", APP_HOOKS),
            PatchSpec.after_anchor(app, "{/* CRA: routes */}", AUTH_ROUTES),
            PatchSpec.after_anchor(app, "{/* CRA: left-aligned nav buttons */}", LEFT_NAV),
            PatchSpec.after_anchor(app, "{/* CRA: right-aligned nav buttons */}", RIGHT_NAV),
            PatchSpec.after_anchor(bundle, "{/* CRA: Wrap */}", "\n<AuthProvider>"),
            PatchSpec.after_anchor(bundle, "{/* CRA: Unwrap */}", "\n</AuthProvider>"),
        ]

        if config.backend_framework is BackendFramework.ACTIX_WEB:
            patches.append(
                register_actix(
                    layout.main_file, 'create_rust_app::auth::endpoints(web::scope("/auth"))'
                )
            )
        else:
            patches.append(
                register_poem(layout.main_file, "create_rust_app::auth::api()", "/auth")
            )

        return PluginPlan(
            assets=store.assets(ASSET_PREFIX),
            patches=patches,
            migrations=[
                MigrationRequest("plugin_auth", UP_BY_DATABASE[config.backend_database], DOWN)
            ],
        )
