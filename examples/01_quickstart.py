#!/usr/bin/env python3
"""Example: Quickstart for flowauthz

Grant a user permission on a work item, then try to change the item's
priority with and without that permission.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install flowauthz
"""
from __future__ import annotations

import flowauthz as authz


def main() -> None:
    print(f"flowauthz version: {authz.__version__}")

    # Step 1: Build the core with default settings (AUTO revoke mode)
    governor = authz.AuthorizationGovernor()
    context = authz.PrincipalContext("demo", group_ids=("clerks",))
    item = authz.WorkItemRef("t1", template_key="invoice")
    priorities: dict[str, int] = {}

    # Step 2: No authorizations yet, so the mutation is denied
    try:
        governor.guard(context, authz.OperationKind.SET_PRIORITY, item, priorities.__setitem__, "t1", 80)
    except authz.AuthorizationDenied as exc:
        print(f"Denied: {exc}")

    # Step 3: Grant the clerks group UPDATE_ITEMS on the owning process template
    governor.grant_group("clerks", authz.ResourceType.PROCESS_TEMPLATE, "invoice", [authz.Permission.UPDATE_ITEMS])
    governor.guard(context, authz.OperationKind.SET_PRIORITY, item, priorities.__setitem__, "t1", 80)
    print(f"Priority after grant: {priorities['t1']}")

    # Step 4: A revoke on the template wins over the grant
    governor.revoke_user("demo", authz.ResourceType.PROCESS_TEMPLATE, authz.ANY, [authz.Permission.ALL])
    decision = governor.authorize(
        context,
        authz.AuthorizationRequest.any_of(
            [authz.PermissionCheck(authz.ResourceType.PROCESS_TEMPLATE, "invoice", authz.Permission.UPDATE_ITEMS)]
        ),
    )
    print(f"Authorized after revoke: {decision.authorized}")


if __name__ == "__main__":
    main()
