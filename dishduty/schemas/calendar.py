from pydantic import BaseModel


class CalendarEvent(BaseModel):
    """月曆事件（FullCalendar 格式）"""
    title: str
    start: str
    extendedProps: dict
