"""Backend endpoint templates. `:name` segments are filled per call."""

ENDPOINTS = {
    "TUTOR_LOGIN": "/auth/tutor/login",
    "TUTOR": "/tutors/:id",
    "STUDENT": "/students/:id",
    "MARK_STUDENT_ATTENDANCE": "/students/markDailyAttendance",
    "BUTTON_STATUS": "/attendance/buttonStatus",
    "ATTENDANCE": "/tutors/attendance",
    "ATTENDANCE_RECENT": "/attendance/recent",
    "ANNOUNCEMENTS": "/announcements/",
    "VERSION_CHECK": "/native/version-check",
    "STUDENT_SUBJECTS_BY_STUDENT": "/student-subjects/student/:studentId",
    "STUDENT_SUBJECT_UPDATE": "/student-subjects/update/:studentId/:subjectId",
    "STUDENT_SUBJECT_DELETE_MARK": "/student-subjects/delete/:markId/:subjectId",
    "STUDENT_SUBJECT_ADD_MARKS": "/student-subjects/marks/:studentId/:subjectId",
}
