"""User-facing copy.

Employees are addressed in Gujarati, customers in English.  One-time codes
only ever go to employees, so their copy is Gujarati too.
"""

# ── Shared ───────────────────────────────────────────────

ERROR_EMPLOYEE = (
    "માફ કરશો, તમારા મેસેજને પ્રોસેસ કરવામાં ભૂલ થઈ. "
    "કૃપા કરીને ફરીથી પ્રયાસ કરો અથવા મદદ માટે 'મદદ' ટાઈપ કરો."
)
ERROR_CUSTOMER = (
    "Sorry, I encountered an error processing your message. "
    "Please try again or type 'help' for assistance."
)

# ── One-time codes ───────────────────────────────────────

OTP_DELIVERY = (
    "🔐 તમારો વેરિફિકેશન કોડ છે: *{code}*\n\n"
    "આ કોડ {ttl} મિનિટમાં સમાપ્ત થશે. કોઈની સાથે શેર કરશો નહીં."
)
OTP_NOT_FOUND = "❌ કોઈ OTP મળ્યો નથી. કૃપા કરીને નવો OTP મંગાવવા 'resend' ટાઈપ કરો."
OTP_EXPIRED = "⏰ OTP ની મુદત પૂરી થઈ ગઈ છે. કૃપા કરીને નવો OTP મંગાવવા 'resend' ટાઈપ કરો."
OTP_TOO_MANY_ATTEMPTS = "🚫 ઘણા બધા ખોટા પ્રયાસો. કૃપા કરીને નવો OTP મંગાવવા 'resend' ટાઈપ કરો."
OTP_INVALID = "❌ ખોટો OTP. {remaining} પ્રયાસ બાકી છે."
OTP_ACCEPTED = "✅ સફળતાપૂર્વક વેરિફાઈ થયું!"
OTP_UNAVAILABLE = (
    "⚠️ વેરિફિકેશન સેવા હાલમાં ઉપલબ્ધ નથી. કૃપા કરીને થોડી વાર પછી પ્રયાસ કરો."
)

# ── Employee: verification gate ──────────────────────────

VERIFY_FIRST_CONTACT = (
    "👋 કર્મચારી પોર્ટલમાં આપનું સ્વાગત છે!\n\n"
    "🔐 સુરક્ષા માટે, કૃપા કરીને તમારું એકાઉન્ટ વેરિફાઈ કરો. "
    "મેં તમને 6-અંકનો વેરિફિકેશન કોડ મોકલ્યો છે.\n\n"
    "આગળ વધવા માટે કૃપા કરીને કોડ દાખલ કરો:"
)
VERIFY_REMINDER = (
    "🔐 કૃપા કરીને તમારો 6-અંકનો વેરિફિકેશન કોડ દાખલ કરો:\n\n"
    "નવો કોડ જોઈએ તો 'resend' ટાઈપ કરો."
)
VERIFY_RESENT = "📲 નવો OTP મોકલ્યો છે! કૃપા કરીને 6-અંકનો કોડ દાખલ કરો:"
VERIFY_SEND_FAILED = "❌ OTP મોકલવામાં નિષ્ફળ. કૃપા કરીને પછીથી પ્રયાસ કરો."

# ── Employee: menu & help ────────────────────────────────

EMPLOYEE_WELCOME = (
    "🎉 *કર્મચારી પોર્ટલમાં આપનું સ્વાગત છે!*\n\n"
    "તમે હવે વેરિફાઈ થઈ ગયા છો અને અમારી કર્મચારી સેવાઓનો ઉપયોગ કરવા તૈયાર છો.\n\n"
    "આજે તમે શું કરવા માંગો છો?"
)
EMPLOYEE_MENU = "👷‍♂️ *કર્મચારી પોર્ટલ*\n\nઆજે હું તમારી કેવી મદદ કરી શકું?"
EMPLOYEE_MENU_MORE = "વધારાના વિકલ્પો:"
EMPLOYEE_MENU_MORE_BUTTON = "વધુ વિકલ્પો"
EMPLOYEE_MENU_MORE_SECTION = "સહાય"
EMPLOYEE_HELP = (
    "🤝 *કર્મચારી મદદ અને સહાય*\n\n"
    "*ઉપલબ્ધ કમાન્ડ્સ:*\n"
    "• *મેનુ* ટાઈપ કરો - મુખ્ય મેનુ પર જાઓ\n"
    "• *1* - કામની નોંધ કરો\n"
    "• *2* - સામગ્રીની માંગ\n"
    "• *3* - તમારું ડેશબોર્ડ જુઓ\n"
    "• *5* - ઇન્વેન્ટરી મેનેજમેન્ટ\n\n"
    "*મદદ જોઈએ?*\n"
    "• ફોન: {admin_contact} (એડમિન)\n\n"
    "*કામના કલાકો:*\n"
    "સોમવાર - શનિવાર: સવારે 8:00 - સાંજે 6:00"
)
EMPLOYEE_CONTACT_ADMIN = (
    "📞 *એડમિનનો સંપર્ક*\n\n"
    "વહીવટીતંત્રનો સંપર્ક કરવા માટે આ નંબર પર કૉલ કરો: {admin_contact}\n\n"
    "મુખ્ય મેનુ પર જવા માટે *મેનુ* ટાઈપ કરો."
)

# ── Employee: catalogues ─────────────────────────────────

SITES = {
    "site_1": ("🏗️ સાઈટ A - રહેઠાણ", "મુખ્ય રહેઠાણ પ્રોજેક્ટ"),
    "site_2": ("🏢 સાઈટ B - વાણિજ્યિક", "ઓફિસ કોમ્પ્લેક્સ પ્રોજેક્ટ"),
    "site_3": ("🏬 સાઈટ C - રિટેલ", "શોપિંગ સેન્ટર પ્રોજેક્ટ"),
}
ACTIVITY_TYPES = {
    "construction": ("🔨 બાંધકામ કાર્ય", "બિલ્ડિંગ અને બાંધકામના કાર્યો"),
    "inspection": ("🔍 તપાસ", "ગુણવત્તા તપાસ અને નિરીક્ષણ"),
    "maintenance": ("🔧 જાળવણી", "સાધનો અને સાઈટની જાળવણી"),
    "planning": ("📋 આયોજન", "પ્રોજેક્ટ આયોજન અને સંકલન"),
    "other": ("📝 અન્ય", "અન્ય કામની પ્રવૃત્તિઓ"),
}
URGENCY_LEVELS = {
    "low": ("🟢 ઓછી પ્રાથમિકતા", "એક અઠવાડિયામાં જોઈએ છે"),
    "medium": ("🟡 મધ્યમ પ્રાથમિકતા", "2-3 દિવસમાં જોઈએ છે"),
    "high": ("🔴 ઉચ્ચ પ્રાથમિકતા", "તાત્કાલિક જોઈએ છે (આજ/આવતીકાલે)"),
}

# ── Employee: activity logging ───────────────────────────

SELECT_SITE = "તમે જ્યાં કામ કર્યું છે તે સાઈટ પસંદ કરો:"
SELECT_SITE_BUTTON = "સાઈટ પસંદ કરો"
SELECT_SITE_SECTION = "સક્રિય સાઈટ્સ"
SELECT_SITE_INVALID = "કૃપા કરીને યાદીમાંથી યોગ્ય સાઈટ પસંદ કરો:"
SELECT_ACTIVITY = "તમે કયા પ્રકારનું કામ કર્યું?"
SELECT_ACTIVITY_BUTTON = "પ્રકાર પસંદ કરો"
SELECT_ACTIVITY_SECTION = "પ્રવૃત્તિના પ્રકારો"
SELECT_ACTIVITY_INVALID = "કૃપા કરીને યોગ્ય પ્રવૃત્તિનો પ્રકાર પસંદ કરો:"
ENTER_HOURS = "તમે કેટલા કલાક કામ કર્યું? (નંબર દાખલ કરો):"
ENTER_HOURS_INVALID = "કૃપા કરીને યોગ્ય કલાકોની સંખ્યા દાખલ કરો (1-24):"
ENTER_DESCRIPTION = "તમે શું કામ કર્યું તેનું વર્ણન કરો (વૈકલ્પિક - 'skip' ટાઈપ કરો છોડવા માટે):"
UPLOAD_ACTIVITY_PHOTO = (
    "📸 કૃપા કરીને કામનો ફોટો અપલોડ કરો:\n\n"
    "• કામની સાઈટનો ફોટો\n"
    "• પૂર્ણ થયેલા કામનો ફોટો\n"
    "• કોઈ ફોટો ન હોય તો 'skip' ટાઈપ કરો"
)
UPLOAD_IN_PROGRESS = "📤 ફોટો અપલોડ કરી રહ્યા છીએ..."
UPLOAD_DONE = "✅ ફોટો સફળતાપૂર્વક અપલોડ થયો!"
UPLOAD_FAILED = "❌ ફોટો અપલોડ કરવામાં નિષ્ફળ. કૃપા કરીને ફરીથી પ્રયાસ કરો અથવા 'skip' ટાઈપ કરો."
UPLOAD_PROMPT = "કૃપા કરીને ફોટો અપલોડ કરો અથવા 'skip' ટાઈપ કરો:"
ACTIVITY_PHOTO_CAPTION = "કામની પ્રવૃત્તિનો ફોટો"
WITH_PHOTO = "📸 ફોટો સહિત"
WITHOUT_PHOTO = "📝 ફોટો વગર"
NO_DESCRIPTION = "કોઈ વર્ણન નથી"
ACTIVITY_LOGGED = (
    "✅ *પ્રવૃત્તિ સફળતાપૂર્વક નોંધાઈ!*\n\n"
    "📋 *વિગતો:*\n"
    "• સાઈટ: {site}\n"
    "• પ્રવૃત્તિ: {activity}\n"
    "• કલાકો: {hours}\n"
    "• વર્ણન: {description}\n"
    "• {photo}\n\n"
    "*પ્રવૃત્તિ ID:* {short_id}\n\n"
    "મુખ્ય મેનુ પર જવા માટે *મેનુ* ટાઈપ કરો."
)
ACTIVITY_FAILED = "માફ કરશો, તમારી પ્રવૃત્તિ નોંધવામાં ભૂલ થઈ. કૃપા કરીને ફરીથી પ્રયાસ કરો."

# ── Employee: material requests ──────────────────────────

MATERIAL_SELECT_SITE = "કઈ સાઈટ માટે સામગ્રી જોઈએ છે?"
MATERIAL_SELECT_SITE_INVALID = "કૃપા કરીને યોગ્ય સાઈટ પસંદ કરો:"
ENTER_MATERIAL = "તમને કઈ સામગ્રીની જરૂર છે? (જેમ કે, સિમેન્ટ, સ્ટીલ, રેતી વગેરે):"
ENTER_MATERIAL_INVALID = "કૃપા કરીને યોગ્ય સામગ્રીનું નામ દાખલ કરો:"
ENTER_QUANTITY = "કેટલી માત્રામાં જોઈએ છે? (જેમ કે, 10 બેગ, 5 ટન, 100 પીસ):"
ENTER_QUANTITY_INVALID = "કૃપા કરીને આ ફોર્મેટમાં માત્રા દાખલ કરો: '10 બેગ' અથવા '5 ટન':"
SELECT_URGENCY = "આ વિનંતી કેટલી તાત્કાલિક છે?"
SELECT_URGENCY_BUTTON = "તાત્કાલિકતા પસંદ કરો"
SELECT_URGENCY_SECTION = "તાત્કાલિકતાના સ્તરો"
SELECT_URGENCY_INVALID = "કૃપા કરીને યોગ્ય તાત્કાલિકતાનું સ્તર પસંદ કરો:"
UPLOAD_MATERIAL_PHOTO = (
    "📸 કૃપા કરીને સામગ્રીનો ફોટો અપલોડ કરો:\n\n"
    "• જરૂરી સામગ્રીનો ફોટો\n"
    "• હાલની સામગ્રીની સ્થિતિનો ફોટો\n"
    "• કોઈ ફોટો ન હોય તો 'skip' ટાઈપ કરો"
)
MATERIAL_PHOTO_CAPTION = "સામગ્રીની વિનંતીનો ફોટો"
MATERIAL_NOTES = "WhatsApp દ્વારા વિનંતી"
MATERIAL_REQUESTED = (
    "✅ *સામગ્રીની વિનંતી મોકલાઈ ગઈ!*\n\n"
    "📦 *વિનંતીની વિગતો:*\n"
    "• સામગ્રી: {material}\n"
    "• માત્રા: {quantity} {unit}\n"
    "• સાઈટ: {site}\n"
    "• તાત્કાલિકતા: {urgency}\n"
    "• {photo}\n\n"
    "*વિનંતી ID:* {short_id}\n\n"
    "તમારી વિનંતી ખરીદી ટીમને મોકલી દેવામાં આવી છે. "
    "સ્ટેટસ વિશે તમને જાણ કરવામાં આવશે.\n\n"
    "મુખ્ય મેનુ પર જવા માટે *મેનુ* ટાઈપ કરો."
)
MATERIAL_FAILED = "માફ કરશો, તમારી વિનંતી મોકલવામાં ભૂલ થઈ. કૃપા કરીને ફરીથી પ્રયાસ કરો."

# ── Employee: dashboard ──────────────────────────────────

DASHBOARD = (
    "📊 *તમારું ડેશબોર્ડ*\n\n"
    "📅 *સારાંશ:*\n"
    "• કુલ નોંધાયેલા કલાકો: {total_hours}\n"
    "• નોંધાયેલી પ્રવૃત્તિઓ: {activity_count}\n"
    "• બાકી વિનંતીઓ: {request_count}\n\n"
    "📝 *તાજેતરની પ્રવૃત્તિઓ:*\n{activities}\n\n"
    "📦 *બાકી સામગ્રીની વિનંતીઓ:*\n{requests}\n\n"
    "વધુ વિકલ્પો માટે *મેનુ* ટાઈપ કરો."
)
DASHBOARD_ACTIVITY_LINE = "• {activity} - {hours}કલ"
DASHBOARD_REQUEST_LINE = "• {material} ({status})"
DASHBOARD_NO_ACTIVITIES = "કોઈ તાજેતરની પ્રવૃત્તિઓ નથી"
DASHBOARD_NO_REQUESTS = "કોઈ બાકી વિનંતીઓ નથી"

# ── Employee: inventory ──────────────────────────────────

INVENTORY_OPERATIONS = {
    "item_in": "📦 સ્ટોક ઉમેરો",
    "item_out": "📤 સ્ટોક કાઢો",
    "stock_report": "📊 સ્ટોક રિપોર્ટ",
}
INVENTORY_CATEGORIES = {
    "building_material": ("🏗️ બાંધકામ સામગ્રી", "સિમેન્ટ, સ્ટીલ, ઈંટો, રેતી વગેરે"),
    "contractor_materials": ("🛠️ કોન્ટ્રાક્ટર સામગ્રી", "સ્કેફોલ્ડિંગ, પ્રોપ્સ, ટૂલ્સ વગેરે"),
    "electrical_materials": ("⚡ ઇલેક્ટ્રિકલ સામગ્રી", "વાયર, સ્વિચ, MCB વગેરે"),
}
# item id -> (name, category, unit)
INVENTORY_ITEMS = {
    "cement": ("સિમેન્ટ", "building_material", "બેગ"),
    "steel": ("સ્ટીલ", "building_material", "કિલો"),
    "bricks": ("ઈંટો", "building_material", "નંગ"),
    "sand": ("રેતી", "building_material", "ટન"),
    "scaffolding": ("સ્કેફોલ્ડિંગ", "contractor_materials", "સેટ"),
    "props": ("પ્રોપ્સ", "contractor_materials", "નંગ"),
    "wire": ("વાયર", "electrical_materials", "મીટર"),
    "switch": ("સ્વિચ", "electrical_materials", "નંગ"),
    "mcb": ("MCB", "electrical_materials", "નંગ"),
}

INVENTORY_SELECT_SITE = "કઈ સાઈટની ઇન્વેન્ટરી અપડેટ કરવી છે?"
INVENTORY_SELECT_SITE_INVALID = "કૃપા કરીને યોગ્ય સાઈટ પસંદ કરો:"
INVENTORY_MENU = "📦 *ઇન્વેન્ટરી મેનેજમેન્ટ*\n\nતમે શું કરવા માંગો છો?"
INVENTORY_OPERATION_INVALID = "❌ કૃપા કરીને યોગ્ય વિકલ્પ પસંદ કરો:"
INVENTORY_SELECT_CATEGORY = "📂 *કેટેગરી પસંદ કરો*\n\n{operation} માટે કેટેગરી પસંદ કરો:"
INVENTORY_CATEGORY_BUTTON = "કેટેગરી પસંદ કરો"
INVENTORY_CATEGORY_SECTION = "કેટેગરીઓ"
INVENTORY_CATEGORY_INVALID = "❌ કૃપા કરીને યોગ્ય કેટેગરી પસંદ કરો:"
INVENTORY_SELECT_ITEM = "📦 *આઇટમ પસંદ કરો*"
INVENTORY_ITEM_BUTTON = "આઇટમ પસંદ કરો"
INVENTORY_ITEM_SECTION = "આઇટમ્સ"
INVENTORY_ITEM_INVALID = "❌ કૃપા કરીને યાદીમાંથી યોગ્ય આઇટમ પસંદ કરો:"
INVENTORY_ITEM_STOCK = "સ્ટોક: {stock} {unit}"
INVENTORY_ENTER_QUANTITY = "📊 *{item}* ની માત્રા દાખલ કરો ({unit} માં):"
INVENTORY_QUANTITY_INVALID = "❌ કૃપા કરીને યોગ્ય માત્રા દાખલ કરો (0 કરતા વધુ):"
INVENTORY_INSUFFICIENT_STOCK = (
    "❌ અપૂરતો સ્ટોક! ઉપલબ્ધ: {available}, માંગેલ: {requested}\n\n"
    "કૃપા કરીને યોગ્ય માત્રા દાખલ કરો:"
)
INVENTORY_STOCK_UNAVAILABLE = "⚠️ સ્ટોક માહિતી હાલમાં ઉપલબ્ધ નથી. કૃપા કરીને ફરીથી પ્રયાસ કરો."
INVENTORY_ENTER_NOTES = "📝 *ટિપ્પણી (વૈકલ્પિક):*\n\nકૃપા કરીને ટિપ્પણી લખો અથવા 'skip' ટાઈપ કરો છોડવા માટે:"
INVENTORY_UPLOAD_PHOTO = (
    "📸 *ફોટો અપલોડ કરો (ફરજિયાત):*\n\n"
    "સ્ટોકનો ફોટો અપલોડ કરવો ફરજિયાત છે."
)
INVENTORY_PHOTO_REQUIRED = "📸 આ પગલા માટે ફોટો ફરજિયાત છે. કૃપા કરીને સ્ટોકનો ફોટો અપલોડ કરો:"
INVENTORY_UPLOAD_FAILED = "❌ ફોટો અપલોડ કરવામાં નિષ્ફળ. કૃપા કરીને ફરીથી ફોટો મોકલો."
INVENTORY_PHOTO_CAPTION = "ઇન્વેન્ટરી ફોટો"
INVENTORY_ADDED = "ઉમેર્યો"
INVENTORY_REMOVED = "કાઢ્યો"
INVENTORY_UPDATED = (
    "✅ *ઇન્વેન્ટરી અપડેટ સફળ!*\n\n"
    "📦 *વિગતો:*\n"
    "• આઇટમ: {item}\n"
    "• {operation}: {quantity} {unit}\n"
    "• પહેલાનો સ્ટોક: {previous} {unit}\n"
    "• નવો સ્ટોક: {new} {unit}\n"
    "• સાઈટ: {site}\n"
    "• 📸 ફોટો સેવ થયો\n\n"
    "મુખ્ય મેનુ પર જવા માટે *મેનુ* ટાઈપ કરો."
)
INVENTORY_FAILED = (
    "❌ માફ કરશો, તમારી ઇન્વેન્ટરી અપડેટ કરવામાં ભૂલ થઈ. "
    "કૃપા કરીને ફરીથી પ્રયાસ કરો અથવા એડમિનનો સંપર્ક કરો."
)
STOCK_REPORT = "📊 *સ્ટોક રિપોર્ટ - {site}*\n\n{lines}\n\nમુખ્ય મેનુ પર જવા માટે *મેનુ* ટાઈપ કરો."
STOCK_REPORT_CATEGORY = "📂 *{category}:*"
STOCK_REPORT_LINE = "{mark} {item}: {stock} {unit}"
STOCK_REPORT_FAILED = "❌ સ્ટોક રિપોર્ટ લોડ કરવામાં ભૂલ. ફરીથી પ્રયાસ કરો."

# ── Customer: menu & info ────────────────────────────────

CUSTOMER_MENU = "🏗️ Welcome to our Site Management Service!\n\nHow can I help you today?"
CUSTOMER_MENU_MORE = "Or choose from more options:"
CUSTOMER_MENU_MORE_BUTTON = "Select Option"
CUSTOMER_MENU_MORE_SECTION = "Services"
CUSTOMER_HELP = (
    "🤝 *Help & Support*\n\n"
    "*Available Commands:*\n"
    "• Type *menu* - Go to main menu\n"
    "• Type *help* - Show this help\n"
    "• Type *book* - Quick book a visit\n"
    "• Type *interested* - Share your requirements\n"
    "• Type *2* - Check available slots\n\n"
    "*Business Hours:*\n"
    "Monday - Friday: 9:00 AM - 6:00 PM\n"
    "Saturday: 10:00 AM - 4:00 PM\n\n"
    "📞 Call us: {admin_contact}"
)
AVAILABILITY = (
    "📅 *Site Visit Availability*\n\n"
    "*This Week:*\n"
    "• Monday - Friday: 9:00 AM - 5:00 PM\n"
    "• Saturday: 10:00 AM - 4:00 PM\n"
    "• Sunday: Closed\n\n"
    "Each visit takes approximately 1-2 hours.\n\n"
    "Would you like to book a slot? Type *book* to start booking process."
)
PRICING = (
    "💰 *Our Pricing & Plans*\n\n"
    "🏠 *Residential Projects:*\n"
    "• 1 BHK: ₹35-50 Lakhs\n"
    "• 2 BHK: ₹50-75 Lakhs\n"
    "• 3 BHK: ₹75 Lakhs+\n\n"
    "🏢 *Commercial Projects:*\n"
    "• Office Spaces: ₹8,000-12,000/sq ft\n"
    "• Retail Spaces: ₹10,000-15,000/sq ft\n\n"
    "Want to know more? Type *talk_to_sales* to connect with our sales team!"
)
SALES = (
    "📞 *Connect with Sales Team*\n\n"
    "Our sales experts are ready to help you!\n\n"
    "🕐 *Immediate Callback:* tap *Request Callback* and we'll call you back\n"
    "💬 *WhatsApp Chat:* continue chatting here\n"
    "📞 *Direct Call:* {admin_contact}\n\n"
    "What would you prefer?"
)
CALLBACK_ACK = "📞 Thanks! Our sales team will call you back shortly on this number."
CONTINUE_CHAT_ACK = "💬 Great! A member of our sales team will reply here shortly."

# ── Customer: inquiry ────────────────────────────────────

INQUIRY_START = (
    "Great! I'd like to understand your requirements better to provide you "
    "with the most suitable options.\n\nPlease share your *full name*:"
)
INQUIRY_NAME_INVALID = "Please enter a valid name (at least 2 characters):"
INQUIRY_EMAIL_PROMPT = "Thank you {name}!\nPlease share your *email address*:"
INQUIRY_EMAIL_INVALID = "Please enter a valid email address:"
INQUIRY_OCCUPATION_PROMPT = "Great!\nWhat is your *occupation/profession*?"
INQUIRY_OCCUPATION_INVALID = "Please enter a valid occupation:"
INQUIRY_SPACE_PROMPT = (
    "Thanks!\nWhat is your *office space requirement*? (e.g., 600 sq ft, 1000 sq ft, etc.)"
)
INQUIRY_SPACE_INVALID = "Please enter your space requirement:"
INQUIRY_USE_PROMPT = (
    "Perfect!\nWhat will be the *primary use* of this office space? "
    "(e.g., consultancy, retail, café, startup office, etc.)"
)
INQUIRY_USE_INVALID = "Please describe how you plan to use the office space:"
INQUIRY_PRICE_PROMPT = (
    "Excellent!\nWhat is your *expected price range/budget*? "
    "(e.g., ₹50-75 Lakhs, ₹1-2 Crores, etc.)"
)
INQUIRY_PRICE_INVALID = "Please enter your expected price range:"
INQUIRY_SUMMARY = (
    "✅ *Thank you for your details!*\n\n"
    "📋 *Your Requirements Summary:*\n"
    "• Name: {full_name}\n"
    "• Email: {email}\n"
    "• Occupation: {occupation}\n"
    "• Space Requirement: {space_requirement}\n"
    "• Intended Use: {space_use}\n"
    "• Budget Range: {price_range}\n\n"
    "Our team will review your requirements and get back to you with suitable options.\n\n"
    "Would you like to book a site visit to see the project in person?"
)
INQUIRY_FAILED = (
    "Sorry, there was an error saving your details. "
    "Please try again or contact us directly at {admin_contact}"
)
POST_INQUIRY_LATER = (
    "Thank you! Our sales team will contact you within 24 hours.\n\n"
    "📞 For immediate assistance, call: {admin_contact}\n\n"
    "Have a great day! 😊"
)
POST_INQUIRY_UNCLEAR = "Please choose one of the options below:"

# ── Customer: booking ────────────────────────────────────

BOOKING_START = (
    "📅 *Book a Site Visit*\n\n"
    "Let's schedule your site visit!\n\n"
    "Please share your full name:"
)
BOOKING_NAME_INVALID = "Please enter a valid name (at least 2 characters):"
BOOKING_DATE_PROMPT = "Thanks, {name}! Select your preferred date:"
BOOKING_DATE_BUTTON = "Choose Date"
BOOKING_DATE_SECTION = "Available Dates"
BOOKING_DATE_TOMORROW = "Tomorrow"
BOOKING_DATE_INVALID = "Please select a valid date from the options or enter in DD/MM/YYYY format:"
BOOKING_TIME_PROMPT = "Select your preferred time:"
BOOKING_TIME_BUTTON = "Choose Time"
BOOKING_TIME_SECTION = "Available Time Slots"
BOOKING_TIME_INVALID = "Please select a valid time slot:"
BOOKING_NOTES = "Booked via WhatsApp"
BOOKING_CONFIRMED = (
    "✅ *Booking Confirmed!*\n\n"
    "📋 *Details:*\n"
    "• Name: {name}\n"
    "• Date: {date}\n"
    "• Time: {time}\n\n"
    "📍 Our team will contact you 1 day before your visit with location details.\n\n"
    "*Booking ID:* {short_id}\n\n"
    "Type *menu* to go back to main menu."
)
BOOKING_FAILED = (
    "Sorry, there was an error completing your booking. "
    "Please try again or contact support."
)
TIME_SLOTS = {
    "09:00": ("9:00 AM", "Morning slot"),
    "11:00": ("11:00 AM", "Late morning"),
    "14:00": ("2:00 PM", "Afternoon"),
    "16:00": ("4:00 PM", "Evening"),
}
