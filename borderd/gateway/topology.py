"""
borderd Topology Commands

Neighbor table, parent, leader data and role control (thread
start/stop, leave).
"""

import logging
from typing import List

from ..codec import format_u16, hex_encode
from ..errors import ErrorCode
from ..rpc.dispatch import CommandDescriptor, RequestContext, command
from .fields import format_mode


logger = logging.getLogger(__name__)


def handle_neighbor(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        neighbors = gw.stack.get_neighbors()

    doc = request.response
    with doc.array("neighbor_list"):
        for info in neighbors:
            with doc.table():
                doc.add("Role", "C" if info.is_child else "R")
                doc.add("Rloc16", format_u16(info.rloc16))
                doc.add("Age", "%3d" % info.age)
                doc.add("AvgRssi", "%8d" % info.average_rssi)
                doc.add("LastRssi", "%9d" % info.last_rssi)
                doc.add("Mode", format_mode(info.mode))
                doc.add("ExtAddress", hex_encode(info.ext_address))
                doc.add("LinkQualityIn", info.link_quality_in)
    return ErrorCode.NONE


def handle_parent(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        parent = gw.stack.get_parent_info()

    doc = request.response
    with doc.array("parent_list"):
        with doc.table("parent"):
            doc.add("Role", "R")
            doc.add("Rloc16", format_u16(parent.rloc16))
            doc.add("Age", "%3d" % parent.age)
            doc.add("ExtAddress", hex_encode(parent.ext_address))
            doc.add("LinkQualityIn", parent.link_quality_in)
    return ErrorCode.NONE


def handle_leaderdata(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        leader = gw.stack.get_leader_data()

    doc = request.response
    with doc.table("leaderdata"):
        doc.add("PartitionId", leader.partition_id)
        doc.add("Weighting", leader.weighting)
        doc.add("DataVersion", leader.data_version)
        doc.add("StableDataVersion", leader.stable_data_version)
        doc.add("LeaderRouterId", leader.leader_router_id)
    return ErrorCode.NONE


def handle_thread_start(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        gw.stack.set_ip6_enabled(True)
        gw.stack.set_thread_enabled(True)
    logger.info("Thread started")
    return ErrorCode.NONE


def handle_thread_stop(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        gw.stack.set_thread_enabled(False)
        gw.stack.set_ip6_enabled(False)
    logger.info("Thread stopped")
    return ErrorCode.NONE


def handle_leave(gw, request: RequestContext) -> ErrorCode:
    """Factory-reset the stack and kick its event loop."""
    with gw.gate:
        gw.stack.factory_reset()
        gw.notify()
    logger.warning("Stack factory reset")
    return ErrorCode.NONE


def topology_commands() -> List[CommandDescriptor]:
    return [
        command("neighbor", handle_neighbor),
        command("parent", handle_parent),
        command("leaderdata", handle_leaderdata),
        command("threadstart", handle_thread_start),
        command("threadstop", handle_thread_stop),
        command("leave", handle_leave),
    ]
