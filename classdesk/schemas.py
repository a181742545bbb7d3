from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from classdesk.models import PaymentStatus, PaymentType, ViewMode


class _Record(BaseModel):
    # Stored blobs and API payloads use the dashboard's camelCase keys.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class TeacherCreate(_Record):
    name: str
    subject: str = ''
    groups: list[str] = Field(default_factory=list)
    email: str | None = None
    phone: str | None = None
    photo_url: str | None = None


class Teacher(TeacherCreate):
    id: str


class ClassSession(_Record):
    id: str
    day: str
    start_time: str
    end_time: str
    room_id: str


class GroupCreate(_Record):
    name: str
    teacher_id: str
    schedule: list[ClassSession] = Field(default_factory=list)
    start_date: str
    end_date: str
    total_lessons: int = 0
    completed_lessons: int = 0
    last_payment_date: str = ''
    payment_type: PaymentType = PaymentType.PER_LESSON
    payment_period: int | None = None
    monthly_fee: float | None = None


class Group(GroupCreate):
    id: str


class StudentCreate(_Record):
    name: str
    contacts: str = ''
    group_id: str


class Student(StudentCreate):
    id: str


class ClassRoomCreate(_Record):
    name: str
    capacity: int
    location: str | None = None
    equipment: list[str] = Field(default_factory=list)
    is_active: bool = True


class ClassRoom(ClassRoomCreate):
    id: str


class ClassRoomBookingCreate(_Record):
    room_id: str
    group_id: str
    date: str
    start_time: str
    end_time: str
    title: str = ''
    teachers: list[str] = Field(default_factory=list)


class ClassRoomBooking(ClassRoomBookingCreate):
    id: str


class Attendance(_Record):
    session_id: str = ''
    date: str
    group_id: str
    present_students: list[str] = Field(default_factory=list)
    absent_students: list[str] = Field(default_factory=list)


class PaymentCreate(_Record):
    student_id: str
    amount: float
    date: str
    status: PaymentStatus = PaymentStatus.PENDING
    period: str = ''
    lesson_start: int | None = None
    lesson_end: int | None = None
    month: str | None = None


class Payment(PaymentCreate):
    id: str


class PaymentStatusUpdateRequest(_Record):
    status: PaymentStatus


class AttendanceSheetRequest(_Record):
    group_id: str
    date: str
    absent_students: list[str] = Field(default_factory=list)


class GenerateWeekRequest(_Record):
    week_start: date | None = None


class PreferencesUpdateRequest(_Record):
    selected_teacher_id: str | None = None
    view_mode: ViewMode | None = None
