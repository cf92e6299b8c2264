"""
User-facing string tables, keyed by language code.

Every table has an "en" entry; lookups go through
``localization.localized_text`` which falls back to it. Adding a language is
a data change here, nothing else.
"""

EMERGENCY_NUMBER = "108"

SAFETY_DISCLAIMERS = {
    "en": "⚠️ IMPORTANT: This is for awareness only, not medical diagnosis. Always consult healthcare professionals for medical advice.",
    "hi": "⚠️ महत्वपूर्ण: यह केवल जानकारी के लिए है, चिकित्सा निदान नहीं। चिकित्सा सलाह के लिए हमेशा स्वास्थ्य पेशेवरों से सलाह लें।",
    "te": "⚠️ ముఖ్యమైనది: ఇది కేవలం అవగాహన కోసం, వైద్య నిర్ధారణ కాదు. వైద్య సలహా కోసం ఎల్లప్పుడూ ఆరోగ్య నిపుణులను సంప్రదించండి.",
    "ta": "⚠️ முக்கியம்: இது விழிப்புணர்வுக்காக மட்டுமே, மருத்துவ நோயறிதல் அல்ல. மருத்துவ ஆலோசனைக்கு எப்போதும் சுகாதார நிபுணர்களை அணுகவும்.",
    "bn": "⚠️ গুরুত্বপূর্ণ: এটি শুধুমাত্র সচেতনতার জন্য, চিকিৎসা নির্ণয় নয়। চিকিৎসা পরামর্শের জন্য সর্বদা স্বাস্থ্যসেবা পেশাদারদের সাথে পরামর্শ করুন।",
    "mr": "⚠️ महत्त्वाचे: हे फक्त जागरूकतेसाठी आहे, वैद्यकीय निदान नाही. वैद्यकीय सल्ल्यासाठी नेहमी आरोग्य व्यावसायिकांचा सल्ला घ्या.",
}

CRITICAL_EMERGENCY_RESPONSES = {
    "en": "🚨 CRITICAL EMERGENCY 🚨\n\nCall 108 IMMEDIATELY or go to nearest emergency room NOW!\n\nDo not wait. This requires immediate medical attention.\n\n📞 Emergency: 108\n🏥 Go to nearest hospital immediately",
    "hi": "🚨 गंभीर आपातकाल 🚨\n\nतुरंत 108 पर कॉल करें या अभी निकटतम आपातकालीन कक्ष में जाएं!\n\nप्रतीक्षा न करें। इसके लिए तत्काल चिकित्सा सहायता की आवश्यकता है।\n\n📞 आपातकाल: 108\n🏥 तुरंत निकटतम अस्पताल जाएं",
    "te": "🚨 క్రిటికల్ ఎమర్జెన్సీ 🚨\n\nవెంటనే 108కి కాల్ చేయండి లేదా ఇప్పుడే సమీప ఎమర్జెన్సీ రూమ్‌కు వెళ్లండి!\n\nవేచి ఉండవద్దు. దీనికి వెంటనే వైద్య సహాయం అవసరం.\n\n📞 అత్యవసరం: 108\n🏥 వెంటనే సమీప ఆసుపత్రికి వెళ్లండి",
    "ta": "🚨 முக்கியமான அவசரநிலை 🚨\n\nஉடனடியாக 108 ஐ அழைக்கவும் அல்லது இப்போதே அருகிலுள்ள அவசர அறைக்குச் செல்லுங்கள்!\n\nகாத்திருக்காதீர்கள். இதற்கு உடனடி மருத்துவ கவனிப்பு தேவை.\n\n📞 அவசரம்: 108\n🏥 உடனடியாக அருகிலுள்ள மருத்துவமனைக்குச் செல்லுங்கள்",
    "bn": "🚨 গুরুতর জরুরি অবস্থা 🚨\n\nঅবিলম্বে ১০৮ এ কল করুন বা এখনই নিকটতম জরুরি কক্ষে যান!\n\nঅপেক্ষা করবেন না। এর জন্য অবিলম্বে চিকিৎসা সেবা প্রয়োজন।\n\n📞 জরুরি: ১০৮\n🏥 অবিলম্বে নিকটতম হাসপাতালে যান",
    "mr": "🚨 गंभीर आणीबाणी 🚨\n\nलगेच 108 वर कॉल करा किंवा आता जवळच्या आणीबाणी कक्षात जा!\n\nवाट पाहू नका. यासाठी तातडीने वैद्यकीय मदत आवश्यक आहे.\n\n📞 आणीबाणी: 108\n🏥 लगेच जवळच्या रुग्णालयात जा",
}

HIGH_RISK_RESPONSES = {
    "en": "⚠️ HIGH PRIORITY MEDICAL ATTENTION NEEDED ⚠️\n\nThis symptom requires urgent medical evaluation.\n\nPlease:\n• Contact your doctor immediately\n• Go to nearest healthcare center\n• Call 108 if symptoms worsen\n\n📞 Emergency: 108\n🏥 Visit nearest PHC/hospital",
    "hi": "⚠️ उच्च प्राथमिकता चिकित्सा सहायता की आवश्यकता ⚠️\n\nइस लक्षण के लिए तत्काल चिकित्सा मूल्यांकन की आवश्यकता है।\n\nकृपया:\n• तुरंत अपने डॉक्टर से संपर्क करें\n• निकटतम स्वास्थ्य केंद्र जाएं\n• लक्षण बिगड़ने पर 108 पर कॉल करें\n\n📞 आपातकाल: 108\n🏥 निकटतम PHC/अस्पताल जाएं",
    "te": "⚠️ అధిక ప్రాధాన్యత వైద్య సహాయం అవసరం ⚠️\n\nఈ లక్షణానికి అత్యవసర వైద్య మూల్యాంకనం అవసరం.\n\nదయచేసి:\n• వెంటనే మీ వైద్యుడిని సంప్రదించండి\n• సమీప ఆరోగ్య కేంద్రానికి వెళ్లండి\n• లక్షణాలు తీవ్రమైతే 108కి కాల్ చేయండి\n\n📞 అత్యవసరం: 108\n🏥 సమీప PHC/ఆసుపత్రిని సందర్శించండి",
}

NO_MATCH_MESSAGES = {
    "en": "I couldn't find matching symptoms in our database. Please describe your symptoms more clearly (for example: \"fever, headache, cough\") or consult a healthcare professional.",
    "hi": "मुझे हमारे डेटाबेस में मेल खाते लक्षण नहीं मिले। कृपया अपने लक्षणों को अधिक स्पष्ट रूप से बताएं या किसी स्वास्थ्य पेशेवर से सलाह लें।",
    "te": "మా డేటాబేస్‌లో సరిపోలే లక్షణాలు నాకు కనుగొనలేకపోయాను. దయచేసి మీ లక్షణాలను మరింత స్పష్టంగా వివరించండి లేదా ఆరోగ్య నిపుణుడిని సంప్రదించండి.",
}

ERROR_MESSAGES = {
    "en": "I apologize, but I encountered an error analyzing your symptoms. Please consult a healthcare provider for proper evaluation. For emergencies, call 108.",
    "hi": "क्षमा करें, आपके लक्षणों का विश्लेषण करते समय एक त्रुटि हुई। कृपया उचित मूल्यांकन के लिए स्वास्थ्य सेवा प्रदाता से सलाह लें। आपातकाल के लिए 108 पर कॉल करें।",
    "te": "మీ లక్షణాలను విశ్లేషించడంలో నేను లోపాన్ని ఎదుర్కొన్నాను. దయచేసి సరైన మూల్యాంకనం కోసం ఆరోగ్య సేవా ప్రదాతను సంప్రదించండి. అత్యవసర పరిస్థితుల్లో 108కి కాల్ చేయండి.",
    "ta": "உங்கள் அறிகுறிகளை பகுப்பாய்வு செய்வதில் பிழை ஏற்பட்டது. சரியான மதிப்பீட்டிற்கு சுகாதார வழங்குநரை அணுகவும். அவசரநிலைகளுக்கு 108 ஐ அழைக்கவும்.",
}

VALIDATION_GUIDANCE = {
    "en": "Please describe your symptoms as a short list, for example: \"fever, headache, cough\".",
    "hi": "कृपया अपने लक्षण छोटी सूची में बताएं, उदाहरण: \"बुखार, सिरदर्द, खांसी\"।",
    "te": "దయచేసి మీ లక్షణాలను చిన్న జాబితాగా చెప్పండి, ఉదాహరణ: \"జ్వరం, తలనొప్పి, దగ్గు\".",
}

# Formatted with reset_time (HH:MM, UTC)
RATE_LIMITED_MESSAGES = {
    "en": "You've reached the hourly limit for symptom checks. Please try again after {reset_time}.",
    "hi": "आपने लक्षण जांच की घंटे की सीमा पूरी कर ली है। कृपया {reset_time} के बाद पुनः प्रयास करें।",
    "te": "మీరు లక్షణ తనిఖీల గంట పరిమితిని చేరుకున్నారు. దయచేసి {reset_time} తర్వాత మళ్లీ ప్రయత్నించండి.",
}

# Used when the text-generation call is disabled or fails. Never empty.
FALLBACK_ADVISORIES = {
    "en": (
        "This is for awareness only, not medical diagnosis. Rest, drink plenty of fluids and "
        "keep track of how your symptoms change. See a doctor or visit your nearest health "
        "centre if symptoms last more than 2-3 days or get worse. If you notice difficulty "
        "breathing, chest pain, confusion or heavy bleeding, call 108 immediately."
    ),
    "hi": (
        "यह केवल जानकारी के लिए है, चिकित्सा निदान नहीं। आराम करें, भरपूर तरल पदार्थ लें और "
        "लक्षणों पर नजर रखें। यदि लक्षण 2-3 दिन से अधिक रहें या बिगड़ें तो डॉक्टर या निकटतम "
        "स्वास्थ्य केंद्र जाएं। सांस लेने में कठिनाई, सीने में दर्द, भ्रम या भारी रक्तस्राव होने पर "
        "तुरंत 108 पर कॉल करें।"
    ),
    "te": (
        "ఇది కేవలం అవగాహన కోసం, వైద్య నిర్ధారణ కాదు. విశ్రాంతి తీసుకోండి, ద్రవాలు ఎక్కువగా "
        "తాగండి, లక్షణాలను గమనించండి. లక్షణాలు 2-3 రోజులకు మించి ఉంటే లేదా తీవ్రమైతే వైద్యుడిని "
        "లేదా సమీప ఆరోగ్య కేంద్రాన్ని సంప్రదించండి. శ్వాస తీసుకోవడంలో ఇబ్బంది, ఛాతీ నొప్పి ఉంటే "
        "వెంటనే 108కి కాల్ చేయండి."
    ),
    "ta": (
        "இது விழிப்புணர்வுக்காக மட்டுமே, மருத்துவ நோயறிதல் அல்ல. ஓய்வெடுத்து, நிறைய திரவங்களை "
        "அருந்துங்கள். அறிகுறிகள் 2-3 நாட்களுக்கு மேல் நீடித்தால் அல்லது மோசமானால் மருத்துவரை "
        "அணுகவும். மூச்சுத் திணறல் அல்லது மார்பு வலி இருந்தால் உடனடியாக 108 ஐ அழைக்கவும்."
    ),
}
