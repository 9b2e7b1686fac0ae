"""Stock game rules as plain functions over numbers, holdings and events.

Nothing here touches a GameState, a session or the network. The services
package applies these results to a working copy of the game.
"""
