"""
ConversationV1 — public Python API for the Conversation v1 service.

Each method maps one-to-one to a REST endpoint declared in
conversation_cli.endpoints and returns the decoded JSON response.
Raises MissingRequiredParameter / TransportError / DecodeError on failure.
"""

from __future__ import annotations

from typing import Any

from conversation_cli import config, endpoints
from conversation_cli.dispatch import dispatch
from conversation_cli.exceptions import CliError
from conversation_cli.models import ServiceConfig


def _merge_params(params, kwargs):
    """Resolve the params-dict / keyword-argument calling styles into one dict."""
    if params is not None and not isinstance(params, dict):
        raise CliError(
            f"[ERROR] params must be a dict, got {type(params).__name__}."
        )
    merged = dict(params or {})
    merged.update(kwargs)
    return merged


class ConversationV1:
    """Client for the Conversation v1 REST API.

    Every operation accepts either a params dict, keyword arguments, or
    both (keywords win). Fields not declared for the operation are dropped.

    Example:
        conv = ConversationV1(
            version_date=ConversationV1.VERSION_DATE_2017_02_03,
            username="...", password="...",
        )
        conv.message(workspace_id="ws1", input={"text": "hi"})
    """

    name = "conversation"
    version = "v1"
    URL = config.DEFAULT_URL

    VERSION_DATE_2016_07_11 = config.VERSION_DATE_2016_07_11
    VERSION_DATE_2016_09_20 = config.VERSION_DATE_2016_09_20
    VERSION_DATE_2017_02_03 = config.VERSION_DATE_2017_02_03

    def __init__(
        self,
        service: ServiceConfig | None = None,
        *,
        version_date: str | None = None,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        headers: dict | None = None,
        use_unauthenticated: bool = False,
        transport=None,
    ):
        """Initialize the client.

        Args:
            service: A prebuilt ServiceConfig. When omitted, one is built
                from the remaining keyword arguments.
            version_date: API version date sent as ``?version=`` on every
                request. Required; use one of the VERSION_DATE_* constants.
            transport: Callable taking an OutboundRequest and returning a
                TransportResponse. Defaults to the urllib transport.

        Raises:
            ConfigurationError: version date or credentials missing.
        """
        if service is None:
            service = ServiceConfig.create(
                version_date=version_date,
                url=url or self.URL,
                username=username,
                password=password,
                headers=headers,
                use_unauthenticated=use_unauthenticated,
            )
        self._service = service
        self._transport = transport

    @classmethod
    def from_env(cls, *, transport=None) -> ConversationV1:
        """Build a client from CONVERSATION_* values in .env / environment."""
        return cls(ServiceConfig.from_env(), transport=transport)

    @property
    def service(self) -> ServiceConfig:
        return self._service

    def _send(self, declaration, params, kwargs):
        return dispatch(
            declaration, _merge_params(params, kwargs), self._service, self._transport
        )

    def call(self, operation: str, params: dict | None = None, **kwargs) -> Any:
        """Run any declared operation by wire name ('getIntent') or method name ('get_intent')."""
        declaration = endpoints.lookup(operation)
        if declaration is None:
            known = ", ".join(sorted(endpoints.DECLARATIONS))
            raise CliError(f"[ERROR] Unknown operation '{operation}'. Known: {known}")
        return self._send(declaration, params, kwargs)

    # -------------------------------------------------------------------
    # Message
    # -------------------------------------------------------------------

    def message(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Return the service's response to a user utterance.

        Args:
            workspace_id: Workspace to converse with (required).
            input: e.g. ``{"text": "Turn on the lights"}``.
            context: Context returned by the previous turn; carries
                ``conversation_id`` and the dialog stack.
            alternate_intents: Include lower-confidence intents.
            output, entities, intents: Override values for this turn.

        Returns:
            dict with intents, entities, input, output, context.
        """
        return self._send(endpoints.MESSAGE, params, kwargs)

    # -------------------------------------------------------------------
    # Workspaces
    # -------------------------------------------------------------------

    def list_workspaces(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """List workspaces. Optional: page_limit, include_count, sort, cursor."""
        return self._send(endpoints.LIST_WORKSPACES, params, kwargs)

    def create_workspace(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Create a workspace.

        Args:
            name, description, language, metadata: Workspace properties.
            entities, intents, dialog_nodes, counterexamples: Initial content.
        """
        return self._send(endpoints.CREATE_WORKSPACE, params, kwargs)

    def get_workspace(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Get a workspace. With export=True, includes all sub-resources."""
        return self._send(endpoints.GET_WORKSPACE, params, kwargs)

    def delete_workspace(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.DELETE_WORKSPACE, params, kwargs)

    def update_workspace(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Update a workspace. Accepts the same fields as create_workspace."""
        return self._send(endpoints.UPDATE_WORKSPACE, params, kwargs)

    def workspace_status(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Get the training status of a workspace."""
        return self._send(endpoints.WORKSPACE_STATUS, params, kwargs)

    # -------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------

    def create_intent(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Create an intent. Required: workspace_id, intent."""
        return self._send(endpoints.CREATE_INTENT, params, kwargs)

    def get_intents(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_INTENTS, params, kwargs)

    def get_intent(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_INTENT, params, kwargs)

    def update_intent(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Rename or edit an intent.

        Args:
            old_intent: Current intent name (path).
            intent: New intent name (body). Pass the old name to keep it.
            description, examples: Replacement values.
        """
        return self._send(endpoints.UPDATE_INTENT, params, kwargs)

    def delete_intent(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.DELETE_INTENT, params, kwargs)

    # -------------------------------------------------------------------
    # Examples
    # -------------------------------------------------------------------

    def get_examples(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_EXAMPLES, params, kwargs)

    def create_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.CREATE_EXAMPLE, params, kwargs)

    def delete_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.DELETE_EXAMPLE, params, kwargs)

    def get_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_EXAMPLE, params, kwargs)

    def update_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Replace the example *old_text* with *text*."""
        return self._send(endpoints.UPDATE_EXAMPLE, params, kwargs)

    # -------------------------------------------------------------------
    # Counterexamples
    # -------------------------------------------------------------------

    def get_counter_examples(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_COUNTER_EXAMPLES, params, kwargs)

    def create_counter_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.CREATE_COUNTER_EXAMPLE, params, kwargs)

    def delete_counter_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.DELETE_COUNTER_EXAMPLE, params, kwargs)

    def get_counter_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        return self._send(endpoints.GET_COUNTER_EXAMPLE, params, kwargs)

    def update_counter_example(self, params: dict | None = None, **kwargs) -> dict[str, Any]:
        """Replace the counterexample *old_text* with *text*."""
        return self._send(endpoints.UPDATE_COUNTER_EXAMPLE, params, kwargs)
