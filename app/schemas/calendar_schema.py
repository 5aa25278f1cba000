from pydantic import BaseModel


class CalendarEvent(BaseModel):
    id: str
    title: str
    start: str
    allDay: bool
    color: str
