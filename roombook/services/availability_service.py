from flask import current_app
from roombook.models import Room
from roombook.services.booking_service import BookingService
from roombook.utils.timeslots import generate_slots, to_minutes, from_minutes, overlaps

class AvailabilityService:
    """
    Read path for the booking form: which start and end times can be offered
    for a room on a given day. Uses the same overlap rule as the conflict guard
    so the UI never offers a range the guard would reject.
    """

    @staticmethod
    def get_slots():
        cfg = current_app.config
        return generate_slots(cfg['BOOKING_DAY_START'], cfg['BOOKING_DAY_END'], cfg['SLOT_MINUTES'])

    @staticmethod
    def is_slot_free(slot, day_bookings):
        """A slot is taken if any booking satisfies start <= slot < end."""
        slot_end = from_minutes(to_minutes(slot) + 1)
        return not any(overlaps(slot, slot_end, b.start_time, b.end_time) for b in day_bookings)

    @staticmethod
    def _room_is_bookable(room_id):
        room = Room.query.get(room_id)
        return room is not None and room.is_active

    @staticmethod
    def available_start_times(date, room_id, exclude_booking_id=None):
        slots = AvailabilityService.get_slots()

        # Nothing selected yet: offer the whole grid
        if not date or not room_id:
            return slots

        if not AvailabilityService._room_is_bookable(room_id):
            return []

        day_bookings = BookingService.list_confirmed(room_id, date, exclude_booking_id)
        return [s for s in slots if AvailabilityService.is_slot_free(s, day_bookings)]

    @staticmethod
    def available_end_times(date, room_id, start_time, exclude_booking_id=None):
        """
        End times reachable from ``start_time`` without crossing a booking.

        Walks the grid forward from the start slot and stops at the first
        occupied slot, so the result is always one contiguous free block.
        """
        slots = AvailabilityService.get_slots()
        if not start_time or start_time not in slots:
            return []

        start_index = slots.index(start_time)
        candidates = slots[start_index + 1:]

        if not date or not room_id:
            return candidates

        if not AvailabilityService._room_is_bookable(room_id):
            return []

        day_bookings = BookingService.list_confirmed(room_id, date, exclude_booking_id)

        end_times = []
        # slots[i] is the last slot covered by a range ending at slots[i + 1]
        for i, end_time in enumerate(candidates, start=start_index):
            if not AvailabilityService.is_slot_free(slots[i], day_bookings):
                break
            end_times.append(end_time)
        return end_times
