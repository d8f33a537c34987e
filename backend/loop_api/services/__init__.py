# Services package init
"""
Loop API — Services Layer
===========================

What:  Business logic between routes (HTTP) and the hosted backend.

Service Inventory:
    - DataStore (abstract): typed interface to the hosted backend
    - SupabaseStore: DataStore over PostgREST/GoTrue with httpx
    - RealtimeConnection: the process-wide socket.io connection
    - ProfileService: profile read/update and public user listing
    - QuestService: quest create/update/delete/toggle/list and weekly bonus
    - InventoryService: paged inventory and shop catalog reads
    - InteractionService: loop interaction lookup
    - ReactionService: message reaction add/remove + realtime broadcast

Services hold no state of their own; the store and realtime connection are
passed into every call.
"""
