from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file, session

from ..common.web import current_role, error_response, login_required, request_data, roles_required
from ..container import Container
from ..core.enums import PersonCategory, Role
from ..sessions.qr_image import render_png
from .model import Person


def person_json(p: Person) -> dict:
    out = {
        "id": p.person_id,
        "fullName": p.display_name,
        "category": p.category.value,
        "email": p.email,
        "department": p.department,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }
    if p.category == PersonCategory.STUDENT:
        out.update(rollNumber=p.natural_key, year=p.year, course=p.course)
    else:
        out["facultyId"] = p.natural_key
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        try:
            category = PersonCategory(data.get("userType", PersonCategory.STUDENT.value))
        except ValueError:
            return error_response("Unknown user type", 400)

        s_user = container.auth_service.authenticate(category, data.get("username", ""), data.get("password", ""))

        session.clear()
        session["person_id"] = s_user.person_id
        session["name"] = s_user.display_name
        session["natural_key"] = s_user.natural_key
        session["role"] = s_user.role.value
        session["department"] = s_user.department

        return jsonify({"success": True, "message": "Login successful", "role": s_user.role.value, "name": s_user.display_name})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})

    @app.route("/register", methods=["POST"], endpoint="register")
    def register_student():
        data = request_data()
        person_id = container.person_service.register_student(
            full_name=data.get("fullName", ""),
            roll_number=data.get("rollNumber", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            confirm_password=data.get("confirmPassword", ""),
            year=data.get("year", ""),
            course=data.get("course", ""),
            department=data.get("department"),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "id": person_id,
                    "message": "Registration successful! You can now login with your roll number and password.",
                }
            ),
            201,
        )

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "id": session.get("person_id"),
                "name": session.get("name"),
                "naturalKey": session.get("natural_key"),
                "role": session.get("role"),
                "department": session.get("department"),
            }
        )

    @app.route("/api/me/qr.png", endpoint="my_qr")
    @roles_required(Role.STUDENT)
    def my_qr():
        """The student's own badge: a QR code of the roll number for the faculty scanner."""

        return send_file(io.BytesIO(render_png(session["natural_key"])), mimetype="image/png")

    @app.route("/api/students", endpoint="students")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def students():
        found = container.person_service.list_students(
            search=request.args.get("search", ""),
            course=request.args.get("course", ""),
            year=request.args.get("year", ""),
        )
        return jsonify({"success": True, "students": [person_json(s) for s in found]})

    @app.route("/api/admin/faculty", methods=["GET"], endpoint="admin_faculty")
    @roles_required(Role.ADMIN)
    def admin_faculty():
        members = container.person_service.list_faculty(search=request.args.get("search", ""))
        return jsonify(
            {
                "success": True,
                "faculty": [person_json(m) for m in members],
                "overview": container.person_service.faculty_overview(),
            }
        )

    @app.route("/api/admin/faculty", methods=["POST"], endpoint="add_faculty")
    @roles_required(Role.ADMIN)
    def add_faculty():
        data = request_data()
        person_id = container.person_service.add_faculty(
            current_role=current_role(),
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            faculty_id=data.get("facultyId", ""),
            department=data.get("department", ""),
            password=data.get("password", ""),
        )
        return jsonify({"success": True, "id": person_id, "message": "Faculty member added"}), 201

    @app.route("/api/admin/faculty/<person_id>", methods=["PUT"], endpoint="edit_faculty")
    @roles_required(Role.ADMIN)
    def edit_faculty(person_id: str):
        data = request_data()
        updated = container.person_service.edit_faculty(
            current_role=current_role(),
            person_id=person_id,
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            password=data.get("password") or None,
        )
        return jsonify({"success": True, "faculty": person_json(updated), "message": "Faculty member updated"})

    @app.route("/api/admin/faculty/<person_id>", methods=["DELETE"], endpoint="delete_faculty")
    @roles_required(Role.ADMIN)
    def delete_faculty(person_id: str):
        container.person_service.delete_faculty(current_role=current_role(), person_id=person_id)
        return jsonify({"success": True, "message": "Faculty member deleted"})
